"""
orgdown - Org-style outline markup converter

Parses org-style outline documents (headlines, lists, tables, blocks,
in-buffer settings) and exports them to HTML, Markdown and Textile.

Example:
    >>> import orgdown
    >>> orgdown.parse("* Hello\\nworld").to_html()
    '<h1>Hello</h1>\\n<p>world</p>\\n\\n'
"""

__version__ = "1.0.0"

from typing import Any, Sequence, Union

from .config import appsettings, options_resolve
from .lib import Parser, UnsupportedSourceError, Exporter, LOG, state_connectToLogger
from .models import ParserOptions


def parse(source: Union[str, Sequence[str]], **options: Any) -> Parser:
    """
    Parse org-style markup with environment-aware defaults

    Keyword arguments are ParserOptions fields. Unlike calling Parser
    directly, include expansion defaults come from the ORGDOWN_* settings
    (see options_resolve).

    Raises:
        UnsupportedSourceError: source is neither text nor a list of lines
        TypeError: an unknown option was given
    """
    return Parser(source, options_resolve(ParserOptions(**options)))


__all__ = [
    "parse",
    "Parser",
    "UnsupportedSourceError",
    "Exporter",
    "ParserOptions",
    "appsettings",
    "options_resolve",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
