"""
Exporter tests

Tests how export selection, header lines, the title and the typography
pass shape a whole document.
"""

import pytest

import orgdown
from orgdown.lib.exporter import Exporter, formats_list
from orgdown.lib.parser import Parser
from orgdown.models.options import ParserOptions


class TestSelection:
    """Test which headlines reach the output"""

    def test_select_tags(self):
        source = (
            "#+EXPORT_SELECT_TAGS: export\n"
            "* A\n"
            "a body\n"
            "** A1 :export:\n"
            "body\n"
            "* B\n"
            "b body\n"
        )
        assert Parser(source).to_markdown() == "# A\n## A1\nbody\n"

    def test_exclude_tags(self):
        source = "#+EXPORT_EXCLUDE_TAGS: noexport\n* A\n* B :noexport:\nhidden\n** B1\n* C"
        assert Parser(source).to_markdown() == "# A\n# C\n"

    def test_comment_headline(self):
        assert Parser("* A\n* COMMENT B\nsecret\n* C").to_markdown() == "# A\n# C\n"

    def test_default_exclude_tag_is_not_implied(self):
        """Without #+EXPORT_EXCLUDE_TAGS a noexport tag is just a tag"""
        assert Parser("* A :noexport:").to_markdown() == "# A\n"


class TestHeaderLines:
    def test_header_lines_exported(self):
        assert Parser("intro\n* A").to_markdown() == "intro\n# A\n"

    def test_skip_option(self):
        parser = Parser("intro\n* A", ParserOptions(skip_header_lines=True))
        assert parser.to_markdown() == "# A\n"

    def test_skip_setting(self):
        assert Parser("#+OPTIONS: skip:t\nintro\n* A").to_markdown() == "# A\n"


class TestHtmlDocument:
    """Test HTML-only document handling"""

    SOURCE = "This is a dash -- that will remain as is."

    def test_typography_pass(self):
        output = Parser(self.SOURCE).to_html()
        assert "&#8212;" in output
        assert "--" not in output

    def test_typography_pass_skipped(self):
        parser = Parser(self.SOURCE, ParserOptions(skip_typography_pass=True))
        assert parser.to_html() == "<p>This is a dash -- that will remain as is.</p>\n\n"

    def test_typography_curly_quotes(self):
        assert "&#8220;quoted&#8221;" in Parser('"quoted" text').to_html()

    def test_title_without_setting(self):
        parser = Parser("text", ParserOptions(skip_typography_pass=True))
        assert "title" not in parser.to_html()

    def test_markdown_has_no_title(self):
        assert Parser("#+TITLE: T\ntext").to_markdown() == "text\n"


class TestExporter:
    def test_export_options(self):
        parser = Parser(
            "#+TITLE: T\n#+OPTIONS: num:t todo:t f:t ^:nil |:nil\n#+LINK: gh https://github.com/%s",
            ParserOptions(skip_syntax_highlight=True, markup_file="markup.yml"),
        )
        options = Exporter(parser).exportOptions_build()
        assert options.decorate_title
        assert options.export_heading_number
        assert options.export_todo
        assert options.export_footnotes
        assert not options.use_sub_superscripts
        assert options.skip_tables
        assert options.skip_syntax_highlight
        assert options.link_abbrevs == {"gh": "https://github.com/%s"}
        assert options.markup_file == "markup.yml"

    def test_formats(self):
        assert formats_list() == ["html", "markdown", "textile"]

    def test_repeated_export(self):
        """Exporting twice gives the same result"""
        parser = Parser("* A\n- x\n- y", ParserOptions(skip_typography_pass=True))
        assert parser.to_html() == parser.to_html()
        assert parser.to_markdown() == parser.to_markdown()


class TestPackageApi:
    """Test orgdown.parse"""

    def test_parse(self):
        document = orgdown.parse("* Hello\n/world/")
        assert [h.headline_text for h in document.headlines] == ["Hello"]
        assert document.to_textile() == "h1. Hello\n_world_\n"

    def test_parse_options(self):
        document = orgdown.parse("* A", offset=1, skip_typography_pass=True)
        assert document.to_html() == "<h2>A</h2>\n\n"

    def test_parse_unknown_option(self):
        with pytest.raises(TypeError):
            orgdown.parse("* A", no_such_option=True)
