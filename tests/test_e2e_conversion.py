"""
End-to-end conversion tests

Tests the full pipeline: .org file → env_check → source_parse →
document_export → converted file on disk.
"""

from argparse import Namespace
from pathlib import Path

import pytest

from orgdown.__main__ import (
    parser as cli_parser,
    env_check,
    source_parse,
    document_export,
    results_report,
)
from orgdown.config import appsettings
from orgdown.models import ProgramState, pipeline


DATA_DIR = Path(__file__).parent / "data"


SOURCE = """#+TITLE: Field Notes
#+OPTIONS: num:t
#+EXPORT_EXCLUDE_TAGS: noexport

Some /intro/ text.

* Birds
- heron
- kingfisher
  - common
** Sightings
| bird | count |
|------+-------|
| heron | 3 |
* Drafts :noexport:
not ready
* Code
#+BEGIN_SRC python
print("hello")
#+END_SRC
"""


@pytest.fixture
def workspace(tmp_path):
    """Input directory with a notes file and an include"""
    inputdir = tmp_path / "in"
    inputdir.mkdir()
    (inputdir / "notes.org").write_text(SOURCE, encoding="utf-8")
    (inputdir / "appendix.org").write_text("* Appendix\nextra\n", encoding="utf-8")
    return inputdir, tmp_path / "out"


def run(inputdir, outputdir, **options):
    state = ProgramState(inputdir=inputdir, outputdir=outputdir, inputFile="notes.org", **options)
    return pipeline(state, env_check, source_parse, document_export, results_report)


class TestConversion:
    """Test converting a document to each format"""

    def test_html(self, workspace):
        inputdir, outputdir = workspace
        state = run(inputdir, outputdir, skipTypography=True)

        output_file = outputdir / "notes.html"
        assert state.outputFile == output_file
        html = output_file.read_text(encoding="utf-8")
        assert '<h1 class="title">Field Notes</h1>' in html
        assert "<p>Some <i>intro</i> text.</p>" in html
        assert '<span class="heading-number heading-number-1">1</span> Birds' in html
        assert "<li>kingfisher\n<ul>\n<li>common</li>" in html
        assert "<th>bird</th>" in html
        assert "<td>heron</td><td>3</td>" in html
        assert "Drafts" not in html
        assert 'class="highlight"' in html

    def test_markdown(self, workspace):
        inputdir, outputdir = workspace
        state = run(inputdir, outputdir, outputFormat="markdown")

        markdown = (outputdir / "notes.md").read_text(encoding="utf-8")
        assert markdown.startswith("Some *intro* text.\n")
        assert "# Birds\n* heron\n* kingfisher\n  * common\n" in markdown
        assert "| bird | count |\n|---|---|\n| heron | 3 |\n" in markdown
        assert '```python\nprint("hello")\n```\n' in markdown
        assert "not ready" not in markdown
        assert state.exportResult == {
            "output_file": str(outputdir / "notes.md"),
            "headline_count": 4,
            "format": "markdown",
        }

    def test_textile(self, workspace):
        inputdir, outputdir = workspace
        run(inputdir, outputdir, outputFormat="textile")

        textile = (outputdir / "notes.textile").read_text(encoding="utf-8")
        assert "h1. Birds" in textile
        assert "h2. Sightings" in textile
        assert "|heron|3|" in textile

    def test_plain_source_blocks(self, workspace):
        inputdir, outputdir = workspace
        run(inputdir, outputdir, skipSyntaxHighlight=True, skipTypography=True)
        html = (outputdir / "notes.html").read_text(encoding="utf-8")
        assert '<pre class="src" lang="python">\nprint("hello")\n</pre>' in html

    def test_headline_offset(self, workspace):
        inputdir, outputdir = workspace
        run(inputdir, outputdir, outputFormat="markdown", headlineOffset=1)
        assert "## Birds" in (outputdir / "notes.md").read_text(encoding="utf-8")

    def test_skip_header_lines(self, workspace):
        inputdir, outputdir = workspace
        run(inputdir, outputdir, outputFormat="markdown", skipHeaderLines=True)
        assert "intro" not in (outputdir / "notes.md").read_text(encoding="utf-8")


class TestIncludes:
    """Test #+INCLUDE through the pipeline"""

    def write_including(self, inputdir):
        (inputdir / "notes.org").write_text('* Main\n#+INCLUDE: "appendix.org"\n', encoding="utf-8")

    def test_included(self, workspace):
        inputdir, outputdir = workspace
        self.write_including(inputdir)
        run(inputdir, outputdir, outputFormat="markdown", includeFiles=True)
        assert (outputdir / "notes.md").read_text(encoding="utf-8") == "# Main\n# Appendix\nextra\n"

    def test_not_included(self, workspace):
        inputdir, outputdir = workspace
        self.write_including(inputdir)
        run(inputdir, outputdir, outputFormat="markdown", includeFiles=False)
        assert (outputdir / "notes.md").read_text(encoding="utf-8") == "# Main\n"

    def test_disabled_over_environment(self, workspace, monkeypatch):
        """--no-includeFiles wins over ORGDOWN_ENABLE_INCLUDE_FILES"""
        monkeypatch.setattr(appsettings, "enable_include_files", True)
        inputdir, outputdir = workspace
        self.write_including(inputdir)
        options = cli_parser.parse_args(["--inputFile", "notes.org", "--outputFormat", "markdown", "--no-includeFiles"])
        state = ProgramState.state_createFromNamespace(options, inputdir, outputdir)
        pipeline(state, env_check, source_parse, document_export, results_report)
        assert (outputdir / "notes.md").read_text(encoding="utf-8") == "# Main\n"

    def test_outside_include_root(self, workspace):
        inputdir, outputdir = workspace
        self.write_including(inputdir)
        (inputdir / "sub").mkdir()
        run(inputdir, outputdir, outputFormat="markdown", includeFiles=True, includeRoot=str(inputdir / "sub"))
        assert (outputdir / "notes.md").read_text(encoding="utf-8") == "# Main\n"


class TestPipelineErrors:
    def test_missing_input(self, tmp_path):
        state = ProgramState(inputdir=tmp_path, outputdir=tmp_path / "out", inputFile="missing.org")
        with pytest.raises(SystemExit):
            env_check(state)

    def test_export_without_document(self, tmp_path):
        state = ProgramState(outputFile=tmp_path / "x.html")
        with pytest.raises(SystemExit):
            document_export(state)

    def test_report_without_result(self):
        with pytest.raises(SystemExit):
            results_report(ProgramState())


class TestCommandLine:
    """Test argument parsing and state creation"""

    def test_defaults(self):
        options = cli_parser.parse_args(["--inputFile", "notes.org"])
        assert options.outputFormat == "html"
        assert options.includeFiles is None
        assert options.headlineOffset == 0
        assert options.verbosity == 1

    def test_flags(self):
        options = cli_parser.parse_args(
            ["--inputFile", "n.org", "--outputFormat", "textile", "--includeFiles", "--skipTypography", "-vv"]
        )
        assert options.outputFormat == "textile"
        assert options.includeFiles is True
        assert options.skipTypography is True
        assert options.verbosity == 3

    def test_include_files_disabled(self):
        options = cli_parser.parse_args(["--inputFile", "n.org", "--no-includeFiles"])
        assert options.includeFiles is False

    def test_unknown_format(self):
        with pytest.raises(SystemExit):
            cli_parser.parse_args(["--inputFile", "n.org", "--outputFormat", "pdf"])

    def test_state_from_namespace(self, tmp_path):
        options = Namespace(inputFile="n.org", outputFormat="markdown", verbosity=2, unrelated=True)
        state = ProgramState.state_createFromNamespace(options, tmp_path, tmp_path / "out")
        assert state.inputFile == "n.org"
        assert state.outputFormat == "markdown"
        assert state.inputdir == tmp_path
        assert not hasattr(state, "unrelated")


class TestFixtureDocument:
    """Test converting tests/data/field_notes.org"""

    def convert(self, outputdir, **options):
        state = ProgramState(inputdir=DATA_DIR, outputdir=outputdir, inputFile="field_notes.org", **options)
        pipeline(state, env_check, source_parse, document_export, results_report)
        return state

    def test_html_with_markup_file(self, tmp_path):
        self.convert(tmp_path, skipTypography=True, markupFile=str(DATA_DIR / "markup.yml"))
        html = (tmp_path / "field_notes.html").read_text(encoding="utf-8")

        assert "<p>Notes from the <em>spring</em> survey<sup>" in html
        assert '<a href="https://en.wikipedia.org/wiki/Grey_heron">Grey heron</a>' in html
        assert '<span class="heading-number heading-number-1">3</span> Method' in html
        assert "<blockquote>\n<p><strong>Walk</strong> the transect twice.</p>\n</blockquote>" in html
        assert '<p class="footpara">Recorded by two observers.</p>' in html
        assert "birds" not in html
        assert "not ready" not in html

    def test_markdown(self, tmp_path):
        self.convert(tmp_path, outputFormat="markdown")
        markdown = (tmp_path / "field_notes.md").read_text(encoding="utf-8")

        assert "* [Grey heron](https://en.wikipedia.org/wiki/Grey_heron)\n* kingfisher\n  * common\n" in markdown
        assert "> **Walk** the transect twice.\n" in markdown
        assert ":ID:" not in markdown
