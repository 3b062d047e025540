"""
Line classifier tests

Tests context-free classification of single lines and the fields
extracted from them (settings, block headers, list markers...).
"""

import pytest

from orgdown.lib.line import Line
from orgdown.models.line import ParagraphType, BlockKind


class TestParagraphTypes:
    """Test the natural classification of raw lines"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("", ParagraphType.BLANK),
            ("   \t", ParagraphType.BLANK),
            ("# a comment", ParagraphType.COMMENT),
            ("   # indented comment", ParagraphType.COMMENT),
            ("#+TITLE: Notes", ParagraphType.SETTING),
            ("#+BEGIN_SRC ruby", ParagraphType.BLOCK_DELIMITER),
            ("  #+end_example", ParagraphType.BLOCK_DELIMITER),
            (":PROPERTIES:", ParagraphType.PROPERTY_DRAWER_DELIMITER),
            (":END:", ParagraphType.PROPERTY_DRAWER_DELIMITER),
            (":ID: 42", ParagraphType.PROPERTY_DRAWER_ITEM),
            ("SCHEDULED: <2024-01-01 Mon>", ParagraphType.METADATA),
            ("|-----+----|", ParagraphType.TABLE_SEPARATOR),
            ("| a | b |", ParagraphType.TABLE_ROW),
            ("-----", ParagraphType.HORIZONTAL_RULE),
            ("  1. first", ParagraphType.ORDERED_LIST_ITEM),
            ("2) second", ParagraphType.ORDERED_LIST_ITEM),
            ("- item", ParagraphType.UNORDERED_LIST_ITEM),
            ("+ item", ParagraphType.UNORDERED_LIST_ITEM),
            (": example", ParagraphType.INLINE_EXAMPLE),
            (":", ParagraphType.INLINE_EXAMPLE),
            ("[fn:1] The note", ParagraphType.FOOTNOTE_DEFINITION),
            ("* Headline", ParagraphType.HEADLINE),
            ("Just text", ParagraphType.PARAGRAPH),
            ("*bold* at the start", ParagraphType.PARAGRAPH),
            ("-- not a list", ParagraphType.PARAGRAPH),
        ],
    )
    def test_classification(self, text, expected):
        """Each kind of line is recognised on its own"""
        assert Line(text).paragraph_type == expected

    def test_assigned_type_takes_precedence(self):
        """A type assigned by the parser overrides the natural one"""
        line = Line("| a | b |", ParagraphType.TABLE_HEADER)
        assert line.paragraph_type == ParagraphType.TABLE_HEADER
        assert line.natural_paragraph_type == ParagraphType.TABLE_ROW
        assert line.is_table

    def test_indent(self):
        """Indent counts leading whitespace, blank lines have none"""
        assert Line("    - item").indent == 4
        assert Line("text").indent == 0
        assert Line("      ").indent == 0

    def test_line_terminators_stripped(self):
        """CR/LF are not part of the text"""
        assert Line("text\r\n").text == "text"


class TestSettings:
    """Test in-buffer settings"""

    def test_setting_key_value(self):
        """#+KEY: value yields key and value"""
        assert Line("#+TITLE: My notes").in_buffer_setting == ("TITLE", "My notes")

    def test_setting_empty_value(self):
        """A setting may have an empty value"""
        assert Line("#+A:").in_buffer_setting == ("A", "")

    def test_indented_is_not_setting(self):
        """Settings must start at column 0"""
        assert Line("   #+BEGIN_EXAMPLE:").in_buffer_setting is None

    def test_assigned_code_is_not_setting(self):
        """A line forced to code no longer counts as a setting"""
        assert Line("#+TITLE: x", ParagraphType.CODE).in_buffer_setting is None

    def test_results_start(self):
        """#+RESULTS: opens a results block"""
        assert Line("#+RESULTS:").is_start_of_results_block
        assert not Line("#+TITLE: results").is_start_of_results_block

    def test_link_abbrev(self):
        """#+LINK: name template"""
        assert Line("#+LINK: gh https://github.com/%s").link_abbrev == ("gh", "https://github.com/%s")

    def test_include_directive(self):
        """#+INCLUDE: "path" kind argument"""
        directive = Line('#+INCLUDE: "notes.org" :lines "2-4"').include_directive
        assert directive.path == "notes.org"
        assert directive.kind == ":lines"
        assert directive.argument == '"2-4"'

    def test_include_directive_without_options(self):
        """A bare include has no kind"""
        directive = Line('#+INCLUDE: "notes.org"').include_directive
        assert directive.path == "notes.org"
        assert directive.kind is None


class TestBlocks:
    """Test block delimiter parsing"""

    def test_begin_src(self):
        """Begin line with a language"""
        line = Line("#+BEGIN_SRC ruby")
        assert line.is_begin_block
        assert not line.is_end_block
        assert line.block_type == "SRC"
        assert line.block_kind == BlockKind.SRC
        assert line.block_lang == "ruby"

    def test_end_is_case_insensitive(self):
        """Lower-case delimiters are accepted"""
        line = Line("#+end_quote")
        assert line.is_end_block
        assert line.block_kind == BlockKind.QUOTE

    def test_unknown_block_is_comment(self):
        """Blocks of unknown kinds resolve to comment blocks"""
        assert Line("#+BEGIN_VERSE").block_kind == BlockKind.COMMENT

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("#+begin_src ruby", {}),
            ("#+begin_src ruby :results output", {":results": "output"}),
            ("#+begin_src ruby :results output :exports both", {":results": "output", ":exports": "both"}),
            ('#+begin_src ruby :results "he:llo" :results :tangle a.rb', {":results": '"he:llo"', ":tangle": "a.rb"}),
            ("#+begin_src emacs-lisp :var x=1 y=2", {":var": "x=1 y=2"}),
        ],
    )
    def test_header_arguments(self, text, expected):
        """Each :key takes the tokens up to the next :key"""
        assert Line(text).block_header_arguments == expected

    def test_exports_none_hides_block(self):
        """:exports none turns the block into a comment block"""
        line = Line("#+begin_src sh :exports none")
        assert not line.block_should_be_exported
        assert line.block_kind == BlockKind.COMMENT

    def test_exports_results(self):
        """:exports results hides the code but keeps the results"""
        line = Line("#+begin_src sh :exports results")
        assert not line.block_should_be_exported
        assert line.results_block_should_be_exported

    def test_exports_both(self):
        """:exports both keeps code and results"""
        line = Line("#+begin_src sh :exports both")
        assert line.block_should_be_exported
        assert line.results_block_should_be_exported


class TestOutputText:
    """Test structural markers stripped from output text"""

    def test_list_markers(self):
        assert Line("  1. first").output_text == "first"
        assert Line("- item").output_text == "item"

    def test_inline_example(self):
        assert Line(": some code").output_text == "some code"

    def test_footnote_definition(self):
        line = Line("[fn:note] The text")
        assert line.footnote_definition == ("note", "The text")
        assert line.output_text == "The text"

    def test_property_drawer(self):
        assert Line(":PROPERTIES:").is_property_drawer_begin
        assert Line(":end:").is_property_drawer_end
        assert Line(":CUSTOM_ID: intro").property_drawer_item == ("CUSTOM_ID", "intro")
