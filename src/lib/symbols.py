"""
Symbol tables and user markup overrides

SPECIAL_SYMBOLS maps the backslash entities of org markup to HTML
entities, which all three targets accept. A YAML markup file can
override emphasis markup and symbols per export:

    emphasis:
      "*": "strong"              # HTML: tag name
      "/": ["<i>", "</i>"]       # explicit open/close
    symbols:
      "\\\\alpha": "α"
"""

import dataclasses
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ..models.markup import InlineFormat
from .log import LOG


SPECIAL_SYMBOLS: Dict[str, str] = {
    "\\alpha": "&alpha;",
    "\\beta": "&beta;",
    "\\gamma": "&gamma;",
    "\\delta": "&delta;",
    "\\epsilon": "&epsilon;",
    "\\lambda": "&lambda;",
    "\\mu": "&mu;",
    "\\pi": "&pi;",
    "\\sigma": "&sigma;",
    "\\omega": "&omega;",
    "\\Delta": "&Delta;",
    "\\Sigma": "&Sigma;",
    "\\Omega": "&Omega;",
    "\\infty": "&infin;",
    "\\deg": "&deg;",
    "\\pm": "&plusmn;",
    "\\times": "&times;",
    "\\div": "&divide;",
    "\\neq": "&ne;",
    "\\leq": "&le;",
    "\\geq": "&ge;",
    "\\to": "&rarr;",
    "\\rarr": "&rarr;",
    "\\larr": "&larr;",
    "\\ldots": "&hellip;",
    "\\dots": "&hellip;",
    "\\nbsp": "&nbsp;",
    "\\copy": "&copy;",
    "\\reg": "&reg;",
    "\\trade": "&trade;",
    "\\S": "&sect;",
    "\\P": "&para;",
    "\\euro": "&euro;",
    "\\pound": "&pound;",
    "\\yen": "&yen;",
    "\\laquo": "&laquo;",
    "\\raquo": "&raquo;",
    "\\checkmark": "&#10003;",
}


def markup_load(markup_file: Union[str, Path, None]) -> Optional[Dict[str, Any]]:
    """
    Load a YAML markup override file

    Returns:
        A dict with optional "emphasis" and "symbols" mappings, or None if
        the file is missing, unreadable, not YAML, or has neither key
    """
    if not markup_file:
        return None
    path = Path(markup_file).expanduser()
    try:
        with path.open(encoding="utf-8") as f:
            markup = yaml.safe_load(f)
    except OSError as e:
        LOG(f"Markup file {path} not loaded, using defaults: {e}", level=2)
        return None
    except yaml.YAMLError as e:
        LOG(f"Markup file {path} is not valid YAML, using defaults: {e}", level=2)
        return None

    if not isinstance(markup, dict):
        LOG(f"Markup file {path} has no mappings, using defaults", level=2)
        return None

    result: Dict[str, Any] = {}
    for key in ("emphasis", "symbols"):
        if isinstance(markup.get(key), dict):
            result[key] = markup[key]
    if not result:
        LOG(f"Markup file {path} has neither 'emphasis' nor 'symbols', using defaults", level=2)
        return None
    return result


def tagPair_make(value: Any, tag_style: bool) -> Optional[Tuple[str, str]]:
    """
    Turn a YAML emphasis entry into an (open, close) pair

    A two-item list is taken verbatim. A string is an HTML tag name when
    tag_style is set ("b" → <b>, </b>), otherwise a symmetric marker
    ("**" → **, **).
    """
    if isinstance(value, (list, tuple)) and len(value) == 2 and all(isinstance(v, str) for v in value):
        return value[0], value[1]
    if isinstance(value, str) and value:
        if tag_style:
            return f"<{value}>", f"</{value}>"
        return value, value
    return None


def markupOverrides_apply(inline_format: InlineFormat, markup_file: Union[str, Path, None]) -> InlineFormat:
    """
    Return inline_format with emphasis and symbols overridden from a file

    Unknown markers and malformed entries are ignored; if the file cannot
    be used at all the format is returned unchanged.
    """
    markup = markup_load(markup_file)
    if markup is None:
        return inline_format

    tag_style = inline_format.name == "html"
    emphasis = dict(inline_format.emphasis)
    for marker, value in markup.get("emphasis", {}).items():
        pair = tagPair_make(value, tag_style)
        if marker in emphasis and pair is not None:
            emphasis[marker] = pair

    symbols = dict(inline_format.symbols)
    for symbol, replacement in markup.get("symbols", {}).items():
        if isinstance(symbol, str) and isinstance(replacement, str):
            symbols[symbol] = replacement

    LOG(f"Applied markup overrides from {markup_file}", level=2)
    return dataclasses.replace(inline_format, emphasis=emphasis, symbols=symbols)
