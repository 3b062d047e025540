"""
orgdown - Org-style outline markup converter

Parses org-style outline documents and exports them to HTML, Markdown and
Textile.
"""

__version__ = "1.0.0"

from .parser import Parser, UnsupportedSourceError
from .line import Line
from .headline import Headline
from .exporter import Exporter
from .selector import trees_markForExport
from .html_output_buffer import HtmlOutputBuffer
from .markdown_output_buffer import MarkdownOutputBuffer
from .textile_output_buffer import TextileOutputBuffer
from .log import LOG, state_connectToLogger

__all__ = [
    "Parser",
    "UnsupportedSourceError",
    "Line",
    "Headline",
    "Exporter",
    "trees_markForExport",
    "HtmlOutputBuffer",
    "MarkdownOutputBuffer",
    "TextileOutputBuffer",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
