"""
Headline nodes of the outline

A Headline is a Line that starts a section. Headlines are kept in one
flat, ordered list; nesting is implied by level only, so every algorithm
that needs a subtree keeps its own level-keyed ancestor stack.

Example:
    >>> h = Headline("** TODO Feed cat  :home:pets:")
    >>> h.level, h.keyword, h.headline_text, h.tags
    (2, 'TODO', 'Feed cat', ['home', 'pets'])
"""

import re
from typing import Dict, List, Optional, Pattern

from ..models.line import ParagraphType, ExportState
from .line import Line, HEADLINE_REGEXP


TAGS_REGEXP = re.compile(r"(?:^|\s+):([\w@#%:]+):\s*$")
COMMENT_HEADLINE_REGEXP = re.compile(r"^COMMENT(\s|$)")
DEFAULT_KEYWORDS = ("TODO", "DONE")


class Headline(Line):
    """
    A section-opening line

    Attributes:
        level: Number of leading '*' plus the configured offset
        keyword: TODO-style state token, or None
        tags: Ordered unique tags from a trailing ":a:b:" suffix
        headline_text: Title with keyword and tags removed
        property_drawer: Ordered :KEY: value entries from the drawer below
        body_lines: This headline's own line followed by its section lines
                    (up to the next headline of any level)
        export_state: Decided by the export selector
    """

    def __init__(self, text: str, offset: int = 0, keyword_regexp: Optional[Pattern[str]] = None):
        super().__init__(text)
        match = HEADLINE_REGEXP.match(self.text)
        if not match:
            raise ValueError(f"'{text}' is not a valid headline")

        self.level = len(match.group(1)) + offset
        self.body_lines: List[Line] = []
        self.property_drawer: Dict[str, str] = {}
        self.export_state = ExportState.ALL
        self.keyword: Optional[str] = None
        self.tags: List[str] = []

        headline_text = self.text[match.end():].strip()
        tags_match = TAGS_REGEXP.search(headline_text)
        if tags_match:
            tags = [tag for tag in tags_match.group(1).split(":") if tag]
            self.tags = list(dict.fromkeys(tags))
            headline_text = headline_text[: tags_match.start()]
        self.headline_text = self.keyword_parse(headline_text.strip(), keyword_regexp)

    @staticmethod
    def headline_is(text: str) -> bool:
        """True if text is a headline: '*'+ at column 0 followed by whitespace"""
        return bool(HEADLINE_REGEXP.match(text))

    def keyword_parse(self, text: str, keyword_regexp: Optional[Pattern[str]]) -> str:
        """Strip a leading TODO-style keyword off text, remembering it"""
        words = text.split()
        if not words:
            return text
        first = words[0]
        if first in DEFAULT_KEYWORDS or (keyword_regexp is not None and keyword_regexp.match(first)):
            self.keyword = first
            return text[len(first):].lstrip()
        return text

    @property
    def paragraph_type(self) -> ParagraphType:
        return ParagraphType.HEADLINE

    @property
    def is_comment_headline(self) -> bool:
        return bool(COMMENT_HEADLINE_REGEXP.match(self.headline_text))

    @property
    def output_text(self) -> str:
        return self.headline_text
