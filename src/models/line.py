"""
Line classification models

Enumerations shared by the line classifier, the parser, the export
selector and the output buffers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ParagraphType(Enum):
    """
    Semantic kind of a single source line

    The first group is what the classifier produces on its own; CODE,
    TABLE_HEADER and TITLE only ever appear as an assigned override.
    """
    BLANK = "blank"
    COMMENT = "comment"
    SETTING = "setting"                      # #+KEY: value
    BLOCK_DELIMITER = "block_delimiter"      # #+BEGIN_x / #+END_x
    PROPERTY_DRAWER_DELIMITER = "property_drawer_delimiter"
    PROPERTY_DRAWER_ITEM = "property_drawer_item"
    METADATA = "metadata"                    # SCHEDULED:, DEADLINE:, ...
    TABLE_SEPARATOR = "table_separator"
    TABLE_ROW = "table_row"
    HORIZONTAL_RULE = "horizontal_rule"
    ORDERED_LIST_ITEM = "ordered_list_item"
    UNORDERED_LIST_ITEM = "unordered_list_item"
    INLINE_EXAMPLE = "inline_example"
    FOOTNOTE_DEFINITION = "footnote_definition"
    HEADLINE = "headline"
    PARAGRAPH = "paragraph"

    # Assigned only
    CODE = "code"
    TABLE_HEADER = "table_header"
    TITLE = "title"


class BlockKind(Enum):
    """
    Kind of a #+BEGIN_x / #+END_x block

    The values double as parser modes. Unknown kinds, and source blocks
    whose :exports argument hides the code, resolve to COMMENT.
    """
    SRC = "src"
    EXAMPLE = "example"
    QUOTE = "quote"
    HTML = "html"
    CENTER = "center"
    COMMENT = "comment"


class ExportState(Enum):
    """How much of a headline reaches the output"""
    ALL = "all"
    HEADLINE_ONLY = "headline_only"
    EXCLUDE = "exclude"


@dataclass
class IncludeDirective:
    """
    Parsed #+INCLUDE directive

    Attributes:
        path: Path text as written between the quotes
        kind: First option token (":lines", "src", "example", "quote") or None
        argument: Remaining option text (line range or language), may be ""

    Example:
        '#+INCLUDE: "notes.org" :lines "4-18"'
        → IncludeDirective(path="notes.org", kind=":lines", argument='"4-18"')
    """
    path: str
    kind: Optional[str] = None
    argument: str = ""
