"""
Line classifier for org-style outline markup

A Line wraps one raw source line and classifies it without looking at
its neighbours. Context-dependent decisions (a row that turns out to be a
table header, lines inside a code block, muted results) are made by the
Parser, which records them as an *assigned* paragraph type that then
takes precedence over the natural one.

Classification priority (first match wins):
    blank → comment → in-buffer setting → block delimiter →
    property drawer delimiter/item → planning metadata → table separator →
    table row → horizontal rule → ordered/unordered list item →
    inline example → footnote definition → headline → paragraph

Example:
    >>> Line("  1. first").paragraph_type
    <ParagraphType.ORDERED_LIST_ITEM: 'ordered_list_item'>
    >>> Line("#+BEGIN_SRC ruby :tangle a.rb").block_header_arguments
    {':tangle': 'a.rb'}
"""

import re
from typing import Dict, List, Optional, Tuple

from ..models.line import ParagraphType, BlockKind, IncludeDirective


BLANK_REGEXP = re.compile(r"^\s*$")
COMMENT_REGEXP = re.compile(r"^\s*#(?!\+)")
IN_BUFFER_SETTING_REGEXP = re.compile(r"^#\+(\w+):\s*(.*)$")
BLOCK_REGEXP = re.compile(r"^\s*#\+(BEGIN|END)_(\w+)(?:\s+(.*?))?\s*$", re.IGNORECASE)
PROPERTY_DRAWER_REGEXP = re.compile(r"^\s*:(PROPERTIES|END):\s*$", re.IGNORECASE)
PROPERTY_DRAWER_ITEM_REGEXP = re.compile(r"^\s*:([0-9A-Za-z_\-+]+):\s*(.*)$")
METADATA_REGEXP = re.compile(r"^\s*(CLOCK|DEADLINE|START|CLOSED|SCHEDULED):")
TABLE_SEPARATOR_REGEXP = re.compile(r"^\s*\|-[-+|]*\s*$")
TABLE_ROW_REGEXP = re.compile(r"^\s*\|")
HORIZONTAL_RULE_REGEXP = re.compile(r"^\s*-{5,}\s*$")
ORDERED_LIST_REGEXP = re.compile(r"^\s*\d+[.)]\s+")
UNORDERED_LIST_REGEXP = re.compile(r"^\s*[-+]\s+")
INLINE_EXAMPLE_REGEXP = re.compile(r"^\s*:(\s|$)")
INLINE_EXAMPLE_STRIP_REGEXP = re.compile(r"^\s*: ?")
FOOTNOTE_DEFINITION_REGEXP = re.compile(r"^\[fn:([^\]\s]+)\]\s*(.*)$")
HEADLINE_REGEXP = re.compile(r"^(\*+)\s+")

RESULTS_BLOCK_START_REGEXP = re.compile(r"^\s*#\+RESULTS:", re.IGNORECASE)
LINK_ABBREV_REGEXP = re.compile(r"^\s*#\+LINK:\s*(\w+)\s+(.+)$", re.IGNORECASE)
INCLUDE_FILE_REGEXP = re.compile(r'^\s*#\+INCLUDE:\s*"([^"]+)"(?:\s+(\S+)\s*(.*))?$', re.IGNORECASE)


class Line:
    """
    One classified source line

    Attributes:
        text: Raw line text without its line terminator
        indent: Leading whitespace count (tabs count as one), 0 for blank lines
        assigned_paragraph_type: Override set by the parser, or None
        properties: Line-local properties (e.g. "block_name" from #+name:)
    """

    def __init__(self, text: str, assigned_paragraph_type: Optional[ParagraphType] = None):
        self.text = text.rstrip("\r\n")
        self.assigned_paragraph_type = assigned_paragraph_type
        self.properties: Dict[str, str] = {}
        self._block_match = BLOCK_REGEXP.match(self.text)
        self._natural_type = self.paragraphType_determine()

        if self._natural_type == ParagraphType.BLANK:
            self.indent = 0
        else:
            self.indent = len(self.text) - len(self.text.lstrip())

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r}, {self.paragraph_type.value})"

    def paragraphType_determine(self) -> ParagraphType:
        """
        Classify the raw text (ignoring any assignment)

        Returns:
            The natural ParagraphType of this line
        """
        text = self.text
        if BLANK_REGEXP.match(text):
            return ParagraphType.BLANK
        if COMMENT_REGEXP.match(text):
            return ParagraphType.COMMENT
        if IN_BUFFER_SETTING_REGEXP.match(text):
            return ParagraphType.SETTING
        if self._block_match:
            return ParagraphType.BLOCK_DELIMITER
        if PROPERTY_DRAWER_REGEXP.match(text):
            return ParagraphType.PROPERTY_DRAWER_DELIMITER
        if PROPERTY_DRAWER_ITEM_REGEXP.match(text):
            return ParagraphType.PROPERTY_DRAWER_ITEM
        if METADATA_REGEXP.match(text):
            return ParagraphType.METADATA
        if TABLE_SEPARATOR_REGEXP.match(text):
            return ParagraphType.TABLE_SEPARATOR
        if TABLE_ROW_REGEXP.match(text):
            return ParagraphType.TABLE_ROW
        if HORIZONTAL_RULE_REGEXP.match(text):
            return ParagraphType.HORIZONTAL_RULE
        if ORDERED_LIST_REGEXP.match(text):
            return ParagraphType.ORDERED_LIST_ITEM
        if UNORDERED_LIST_REGEXP.match(text):
            return ParagraphType.UNORDERED_LIST_ITEM
        if INLINE_EXAMPLE_REGEXP.match(text):
            return ParagraphType.INLINE_EXAMPLE
        if FOOTNOTE_DEFINITION_REGEXP.match(text):
            return ParagraphType.FOOTNOTE_DEFINITION
        if HEADLINE_REGEXP.match(text):
            return ParagraphType.HEADLINE
        return ParagraphType.PARAGRAPH

    @property
    def paragraph_type(self) -> ParagraphType:
        """Assigned paragraph type if the parser set one, else the natural one"""
        return self.assigned_paragraph_type or self._natural_type

    @property
    def natural_paragraph_type(self) -> ParagraphType:
        return self._natural_type

    def _is(self, kind: ParagraphType) -> bool:
        return self.paragraph_type == kind

    @property
    def is_blank(self) -> bool:
        return self._is(ParagraphType.BLANK)

    @property
    def is_comment(self) -> bool:
        return self._is(ParagraphType.COMMENT)

    @property
    def is_headline(self) -> bool:
        return self._is(ParagraphType.HEADLINE)

    @property
    def is_list_item(self) -> bool:
        return self.paragraph_type in (ParagraphType.ORDERED_LIST_ITEM, ParagraphType.UNORDERED_LIST_ITEM)

    @property
    def is_table(self) -> bool:
        return self.paragraph_type in (
            ParagraphType.TABLE_ROW,
            ParagraphType.TABLE_SEPARATOR,
            ParagraphType.TABLE_HEADER,
        )

    # Blocks

    @property
    def is_begin_block(self) -> bool:
        return bool(self._block_match) and self._block_match.group(1).upper() == "BEGIN"

    @property
    def is_end_block(self) -> bool:
        return bool(self._block_match) and self._block_match.group(1).upper() == "END"

    @property
    def block_type(self) -> Optional[str]:
        """Upper-cased block kind text ("SRC", "EXAMPLE", ...) or None"""
        if not self._block_match:
            return None
        return self._block_match.group(2).upper()

    @property
    def block_kind(self) -> Optional[BlockKind]:
        """
        Block kind as understood by the parser and output buffers

        Unknown kinds and begin lines whose :exports argument hides the
        code resolve to BlockKind.COMMENT.
        """
        block_type = self.block_type
        if block_type is None:
            return None
        if self.is_begin_block and not self.block_should_be_exported:
            return BlockKind.COMMENT
        try:
            return BlockKind(block_type.lower())
        except ValueError:
            return BlockKind.COMMENT

    def _block_tokens(self) -> List[str]:
        if not self._block_match or not self._block_match.group(3):
            return []
        return self._block_match.group(3).split()

    @property
    def block_lang(self) -> Optional[str]:
        """Language token of a #+BEGIN_SRC line, e.g. "emacs-lisp" """
        tokens = self._block_tokens()
        if tokens and not tokens[0].startswith((":", "-")):
            return tokens[0]
        return None

    @property
    def block_header_arguments(self) -> Dict[str, str]:
        """
        Colon-prefixed header arguments of a block line

        Each :key takes the verbatim tokens up to the next :key. A key
        with no value is ignored, so an earlier value survives a later
        empty repetition.

        Example:
            '#+begin_src ruby :results "he:llo" :results :tangle a.rb'
            → {":results": '"he:llo"', ":tangle": "a.rb"}
        """
        arguments: Dict[str, str] = {}
        key: Optional[str] = None
        value: List[str] = []

        for token in self._block_tokens():
            if token.startswith(":"):
                if key and value:
                    arguments[key] = " ".join(value)
                key = token
                value = []
            elif key:
                value.append(token)

        if key and value:
            arguments[key] = " ".join(value)
        return arguments

    @property
    def block_should_be_exported(self) -> bool:
        return self.block_header_arguments.get(":exports", "") not in ("none", "results")

    @property
    def results_block_should_be_exported(self) -> bool:
        return self.block_header_arguments.get(":exports", "") in ("results", "both")

    # Settings and directives

    @property
    def in_buffer_setting(self) -> Optional[Tuple[str, str]]:
        """
        (key, value) of a #+KEY: value line, or None

        A line the parser reassigned to anything but a comment no longer
        counts as a setting.
        """
        if self.assigned_paragraph_type and self.assigned_paragraph_type != ParagraphType.COMMENT:
            return None
        match = IN_BUFFER_SETTING_REGEXP.match(self.text)
        if not match:
            return None
        return match.group(1), match.group(2)

    @property
    def is_start_of_results_block(self) -> bool:
        return bool(RESULTS_BLOCK_START_REGEXP.match(self.text))

    @property
    def link_abbrev(self) -> Optional[Tuple[str, str]]:
        """(name, url template) of a #+LINK: line, or None"""
        match = LINK_ABBREV_REGEXP.match(self.text)
        if not match:
            return None
        return match.group(1), match.group(2).strip()

    @property
    def include_directive(self) -> Optional[IncludeDirective]:
        match = INCLUDE_FILE_REGEXP.match(self.text)
        if not match:
            return None
        return IncludeDirective(path=match.group(1), kind=match.group(2), argument=(match.group(3) or "").strip())

    # Property drawers

    @property
    def is_property_drawer_begin(self) -> bool:
        match = PROPERTY_DRAWER_REGEXP.match(self.text)
        return bool(match) and match.group(1).upper() == "PROPERTIES"

    @property
    def is_property_drawer_end(self) -> bool:
        match = PROPERTY_DRAWER_REGEXP.match(self.text)
        return bool(match) and match.group(1).upper() == "END"

    @property
    def property_drawer_item(self) -> Optional[Tuple[str, str]]:
        match = PROPERTY_DRAWER_ITEM_REGEXP.match(self.text)
        if not match:
            return None
        return match.group(1), match.group(2)

    @property
    def footnote_definition(self) -> Optional[Tuple[str, str]]:
        match = FOOTNOTE_DEFINITION_REGEXP.match(self.text)
        if not match:
            return None
        return match.group(1), match.group(2)

    @property
    def output_text(self) -> str:
        """
        Text to emit, with structural markers stripped

        List markers, the ": " of inline examples and the "#+KEY:" of
        settings are removed; everything else is returned as is.
        """
        kind = self.paragraph_type
        if kind == ParagraphType.ORDERED_LIST_ITEM:
            return ORDERED_LIST_REGEXP.sub("", self.text, count=1)
        if kind == ParagraphType.UNORDERED_LIST_ITEM:
            return UNORDERED_LIST_REGEXP.sub("", self.text, count=1)
        if kind == ParagraphType.INLINE_EXAMPLE:
            return INLINE_EXAMPLE_STRIP_REGEXP.sub("", self.text, count=1)
        if kind == ParagraphType.SETTING:
            setting = self.in_buffer_setting
            return setting[1] if setting else self.text
        if kind == ParagraphType.FOOTNOTE_DEFINITION:
            definition = self.footnote_definition
            return definition[1] if definition else self.text
        return self.text
