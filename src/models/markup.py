"""
Output-side models

InlineFormat is the capability set a target format hands to the inline
rewrite engine; OutputMode and ModeFrame make up an output buffer's
mode stack.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


def text_identity(text: str) -> str:
    """Escape function for formats that need no escaping"""
    return text


@dataclass
class InlineFormat:
    """
    Capability set of one target markup language

    Attributes:
        name: Format name ("html", "markdown", "textile")
        emphasis: Marker character → (open, close) for *, /, _, +
        code: (open, close) wrapped around =code= and ~verbatim~ spans
        subscript: (open, close) for _{...}
        superscript: (open, close) for ^{...}
        link: (escaped target, label markup) → link markup
        image: escaped image source → image markup
        escape: Escapes literal text for the target (e.g. HTML entities)
        symbols: Literal symbol → replacement (e.g. "\\alpha" → "&alpha;")

    Example:
        InlineFormat(
            name="textile",
            emphasis={"*": ("*", "*"), "/": ("_", "_")},
            code=("@", "@"),
            ...
        )
    """
    name: str
    emphasis: Dict[str, Tuple[str, str]]
    code: Tuple[str, str]
    subscript: Tuple[str, str]
    superscript: Tuple[str, str]
    link: Callable[[str, str], str]
    image: Callable[[str], str]
    escape: Callable[[str], str] = text_identity
    symbols: Dict[str, str] = field(default_factory=dict)


class OutputMode(Enum):
    """Structural contexts an output buffer can be in"""
    # Block modes, opened by #+BEGIN_x and closed only by #+END_x
    QUOTE = "quote"
    CENTER = "center"
    EXAMPLE = "example"
    SRC = "src"
    HTML = "html"

    # Containers
    ORDERED_LIST = "ordered_list"
    UNORDERED_LIST = "unordered_list"
    LIST_ITEM = "list_item"
    TABLE = "table"

    # Single logical blocks, closed by the next boundary
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    TITLE = "title"
    HORIZONTAL_RULE = "horizontal_rule"
    INLINE_EXAMPLE = "inline_example"
    RAW = "raw"


CODE_MODES = (OutputMode.EXAMPLE, OutputMode.SRC)
LIST_MODES = (OutputMode.ORDERED_LIST, OutputMode.UNORDERED_LIST, OutputMode.LIST_ITEM)
TRANSIENT_MODES = (
    OutputMode.PARAGRAPH,
    OutputMode.HEADING,
    OutputMode.TITLE,
    OutputMode.HORIZONTAL_RULE,
    OutputMode.INLINE_EXAMPLE,
    OutputMode.RAW,
)


@dataclass
class ModeFrame:
    """
    One entry of the output buffer's mode stack

    Attributes:
        mode: The structural context
        indent: Source indentation captured when the frame was pushed
                (list nesting is decided by comparing indents)
        properties: Line properties carried along (e.g. block_name, level)
    """
    mode: OutputMode
    indent: int = 0
    properties: Dict[str, Any] = field(default_factory=dict)
    language: Optional[str] = None
