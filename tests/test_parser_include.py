"""
#+INCLUDE tests

Tests include expansion: enabling, line ranges, block wrapping, root
restriction, depth cap and environment-driven defaults.
"""

import pytest

import orgdown
from orgdown.config import AppSettings, appsettings, options_resolve
from orgdown.lib.parser import Parser
from orgdown.models.line import ParagraphType
from orgdown.models.options import ParserOptions


def texts(lines):
    return [line.text for line in lines]


@pytest.fixture
def include_dir(tmp_path):
    """Directory with a few files to include"""
    (tmp_path / "section.org").write_text("* Included\nincluded text\n", encoding="utf-8")
    (tmp_path / "lines.txt").write_text("l1\nl2\nl3\nl4\n", encoding="utf-8")
    (tmp_path / "code.py").write_text("def f():\n    return 1\n", encoding="utf-8")
    return tmp_path


def parse(source, base_dir, **options):
    options.setdefault("allow_include_files", True)
    return Parser(source, ParserOptions(base_dir=base_dir, **options))


class TestIncludeExpansion:
    """Test how included content enters the document"""

    def test_whole_file(self, include_dir):
        parser = parse('#+INCLUDE: "section.org"', include_dir)
        assert [h.headline_text for h in parser.headlines] == ["Included"]
        assert texts(parser.headlines[0].body_lines) == ["* Included", "included text"]

    def test_disabled_by_default(self, include_dir):
        """Parser never includes unless told to"""
        parser = Parser('#+INCLUDE: "section.org"', ParserOptions(base_dir=include_dir))
        assert parser.headlines == []

    def test_explicitly_disabled(self, include_dir):
        parser = parse('#+INCLUDE: "section.org"', include_dir, allow_include_files=False)
        assert parser.headlines == []

    @pytest.mark.parametrize(
        "lines_range, expected",
        [
            ('"2-3"', ["l2"]),
            ('"2-4"', ["l2", "l3"]),
            ('"3-"', ["l3", "l4"]),
            ('"-3"', ["l1", "l2"]),
        ],
    )
    def test_lines_range(self, include_dir, lines_range, expected):
        """:lines is 1-based and excludes its end"""
        parser = parse(f'#+INCLUDE: "lines.txt" :lines {lines_range}', include_dir)
        included = [t for t in texts(parser.header_lines) if t.startswith("l")]
        assert included == expected

    def test_src_wrapping(self, include_dir):
        """src wraps the file in a source block with its language"""
        parser = parse('#+INCLUDE: "code.py" src python', include_dir)
        lines = parser.header_lines
        assert texts(lines)[:4] == ["#+BEGIN_SRC python", "def f():", "    return 1", "#+END_SRC"]
        assert lines[1].paragraph_type == ParagraphType.CODE

    @pytest.mark.parametrize("kind", ["example", "quote"])
    def test_block_wrapping(self, include_dir, kind):
        parser = parse(f'#+INCLUDE: "lines.txt" {kind}', include_dir)
        lines = texts(parser.header_lines)
        assert lines[0] == f"#+BEGIN_{kind.upper()}"
        assert lines[5] == f"#+END_{kind.upper()}"

    def test_unknown_kind_includes_nothing(self, include_dir):
        parser = parse('#+INCLUDE: "lines.txt" verse', include_dir)
        assert "l1" not in texts(parser.header_lines)

    def test_missing_file_skipped(self, include_dir):
        parser = parse('#+INCLUDE: "nope.org"\ntext', include_dir)
        assert "text" in texts(parser.header_lines)

    def test_absolute_path(self, include_dir, tmp_path_factory):
        other = tmp_path_factory.mktemp("other")
        parser = parse(f'#+INCLUDE: "{include_dir / "section.org"}"', other)
        assert [h.headline_text for h in parser.headlines] == ["Included"]

    def test_nested_relative_include(self, include_dir):
        """A relative path inside an included file resolves from that file's directory"""
        sub = include_dir / "sub"
        sub.mkdir()
        (sub / "a.org").write_text('* From A\n#+INCLUDE: "b.org"\n', encoding="utf-8")
        (sub / "b.org").write_text("* From B\n", encoding="utf-8")
        parser = parse('#+INCLUDE: "sub/a.org"', include_dir)
        assert [h.headline_text for h in parser.headlines] == ["From A", "From B"]

    def test_offset_applies_to_included_headlines(self, include_dir):
        parser = parse('#+INCLUDE: "section.org"', include_dir, offset=1)
        assert parser.headlines[0].level == 2


class TestIncludeLimits:
    """Test root restriction and depth cap"""

    def test_outside_root_skipped(self, include_dir):
        (include_dir / "sub").mkdir()
        parser = parse('#+INCLUDE: "section.org"', include_dir, include_root=str(include_dir / "sub"))
        assert parser.headlines == []

    def test_inside_root_included(self, include_dir):
        parser = parse('#+INCLUDE: "section.org"', include_dir, include_root=str(include_dir))
        assert len(parser.headlines) == 1

    def test_parent_escape_skipped(self, include_dir):
        """.. cannot leave the root"""
        sub = include_dir / "sub"
        sub.mkdir()
        parser = parse('#+INCLUDE: "../section.org"', sub, include_root=str(sub))
        assert parser.headlines == []

    def test_depth_cap(self, include_dir):
        """A self-including file stops at the depth cap"""
        (include_dir / "loop.org").write_text('#+INCLUDE: "loop.org"\n* Loop\n', encoding="utf-8")
        parser = parse('#+INCLUDE: "loop.org"\n* Loop', include_dir, max_include_depth=3)
        assert len(parser.headlines) == 4


class TestEnvironmentDefaults:
    """Test options_resolve and orgdown.parse"""

    def test_enable_flag(self, monkeypatch):
        monkeypatch.setenv("ORGDOWN_ENABLE_INCLUDE_FILES", "true")
        options = options_resolve(ParserOptions(), AppSettings())
        assert options.allow_include_files is True

    def test_include_root_enables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ORGDOWN_INCLUDE_ROOT", str(tmp_path))
        options = options_resolve(ParserOptions(), AppSettings())
        assert options.allow_include_files is True
        assert options.include_root == str(tmp_path)

    def test_explicit_false_wins(self, monkeypatch):
        monkeypatch.setenv("ORGDOWN_ENABLE_INCLUDE_FILES", "true")
        options = options_resolve(ParserOptions(allow_include_files=False), AppSettings())
        assert options.allow_include_files is False

    def test_nothing_configured(self, monkeypatch):
        monkeypatch.delenv("ORGDOWN_ENABLE_INCLUDE_FILES", raising=False)
        monkeypatch.delenv("ORGDOWN_INCLUDE_ROOT", raising=False)
        options = options_resolve(ParserOptions(), AppSettings(_env_file=None))
        assert options.allow_include_files is False
        assert options.max_include_depth == 8

    def test_parse_uses_settings(self, monkeypatch, include_dir):
        """orgdown.parse resolves include defaults from the settings"""
        monkeypatch.setattr(appsettings, "enable_include_files", True)
        parser = orgdown.parse(f'#+INCLUDE: "{include_dir / "section.org"}"')
        assert len(parser.headlines) == 1

    def test_parse_without_settings(self, monkeypatch, include_dir):
        monkeypatch.setattr(appsettings, "enable_include_files", False)
        monkeypatch.setattr(appsettings, "include_root", None)
        parser = orgdown.parse(f'#+INCLUDE: "{include_dir / "section.org"}"')
        assert parser.headlines == []
