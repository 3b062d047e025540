"""
Parser for org-style outline markup

Transforms plain-text outline markup into a document model: the raw
lines, a flat ordered list of headlines (nesting implied by level), the
lines before the first headline, in-buffer settings and #+OPTIONS, custom
TODO keywords and link abbreviations.

The parser is a line-by-line state machine over the modes
normal, quote, center, comment, example, html, src and property drawer:

1. Each line is classified by Line (no context).
2. #+INCLUDE directives are expanded in place (when enabled).
3. #+LINK abbreviations are recorded.
4. #+END_x / :END: lines return to normal mode.
5. In normal/quote/center mode headlines are promoted and a table row
   followed by a separator becomes the table header (once per table).
6. In example/html/src mode every line is forced to code.
7. In normal mode settings are stored, blocks are entered, #+name:
   propagates to the next line and #+RESULTS: output is muted.
8. Everything outside comment mode goes to the current headline's body,
   or to the header lines before the first headline.

Example:
    >>> parser = Parser("#+TITLE: Notes\\n* One\\nbody\\n** Two :tag:")
    >>> [(h.level, h.headline_text, h.tags) for h in parser.headlines]
    [(1, 'One', []), (2, 'Two', ['tag'])]
    >>> parser.in_buffer_settings["TITLE"]
    'Notes'
"""

import dataclasses
import re
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Sequence, Union

from ..models.line import ParagraphType, IncludeDirective
from ..models.options import ParserOptions
from .line import Line
from .headline import Headline
from .log import LOG


OPTIONS_REGEXP = re.compile(r"([^ ]*):(\([^)]*\)|[^ ]*)")
TODO_SETTING_REGEXP = re.compile(r"^(TODO|SEQ_TODO|TYP_TODO)$")
DEFAULT_MAX_INCLUDE_DEPTH = 8


class UnsupportedSourceError(TypeError):
    """Raised when the parser is given something other than text or lines"""
    pass


class ParserMode(Enum):
    NORMAL = "normal"
    QUOTE = "quote"
    CENTER = "center"
    COMMENT = "comment"
    EXAMPLE = "example"
    HTML = "html"
    SRC = "src"
    PROPERTY_DRAWER = "property_drawer"


STRUCTURAL_MODES = (ParserMode.NORMAL, ParserMode.QUOTE, ParserMode.CENTER)
CODE_MODES = (ParserMode.EXAMPLE, ParserMode.HTML, ParserMode.SRC)
BLOCK_MODES = CODE_MODES + (ParserMode.QUOTE, ParserMode.CENTER)


def lines_split(text: str) -> List[str]:
    """Split text on newlines, dropping trailing empty lines"""
    lines = text.split("\n")
    while lines and not lines[-1].strip("\r"):
        lines.pop()
    return lines


class Parser:
    """
    Document model built from org-style markup

    Attributes:
        lines: Source lines as given (includes are not spliced in here)
        headlines: All headlines, in document order
        header_lines: Lines before the first headline
        in_buffer_settings: #+KEY: value settings (keys upper-cased)
        options: Entries of #+OPTIONS (e.g. {"toc": "nil", "num": "t"})
        custom_keywords: Keywords from #+TODO / #+SEQ_TODO / #+TYP_TODO
        link_abbrevs: #+LINK name → URL template
        parser_options: The ParserOptions this document was parsed with
    """

    def __init__(self, source: Union[str, Sequence[str]], options: Optional[ParserOptions] = None):
        """
        Parse a document

        Args:
            source: The whole text, or a list of lines
            options: Parser options; allow_include_files=None counts as False
                     here (resolve environment defaults with options_resolve)

        Raises:
            UnsupportedSourceError: source is neither text nor a list of lines
        """
        if isinstance(source, str):
            self.lines = lines_split(source)
        elif isinstance(source, (list, tuple)) and all(isinstance(item, str) for item in source):
            self.lines = list(source)
        else:
            raise UnsupportedSourceError(f"Unsupported type for source: {type(source).__name__}")

        self.parser_options = options or ParserOptions()
        self.headlines: List[Headline] = []
        self.header_lines: List[Line] = []
        self.in_buffer_settings: Dict[str, str] = {}
        self.options: Dict[str, str] = {}
        self.custom_keywords: List[str] = []
        self.link_abbrevs: Dict[str, str] = {}

        self.current_headline: Optional[Headline] = None
        self.next_results_block_should_be_exported = False

        self.lines_parse(self.lines)
        LOG(f"Parsed {len(self.headlines)} headlines from {len(self.lines)} lines", level=2)

    @classmethod
    def load(cls, fname: Union[str, Path], options: Optional[ParserOptions] = None) -> "Parser":
        """
        Create a parser from the contents of a file

        Relative #+INCLUDE paths then resolve against the file's directory.

        Raises:
            OSError: The file cannot be read
        """
        path = Path(fname)
        options = options or ParserOptions()
        if options.base_dir is None:
            options = dataclasses.replace(options, base_dir=path.parent)
        return cls(path.read_text(encoding="utf-8"), options)

    # Document-level accessors

    @property
    def custom_keyword_regexp(self) -> Optional[Pattern[str]]:
        """Regexp matching exactly one of the custom keywords, or None"""
        if not self.custom_keywords:
            return None
        return re.compile("^(" + "|".join(re.escape(kw) for kw in self.custom_keywords) + ")$")

    @property
    def export_select_tags(self) -> List[str]:
        return self.in_buffer_settings.get("EXPORT_SELECT_TAGS", "").split()

    @property
    def export_exclude_tags(self) -> List[str]:
        return self.in_buffer_settings.get("EXPORT_EXCLUDE_TAGS", "").split()

    @property
    def export_todo(self) -> bool:
        return self.options.get("todo") == "t"

    @property
    def export_footnotes(self) -> bool:
        return self.options.get("f") == "t"

    @property
    def export_heading_number(self) -> bool:
        return self.options.get("num") == "t"

    @property
    def skip_header_lines(self) -> bool:
        return self.options.get("skip") == "t" or self.parser_options.skip_header_lines

    @property
    def export_tables(self) -> bool:
        """Tables are exported unless #+OPTIONS says |:nil"""
        return self.options.get("|") != "nil"

    @property
    def use_sub_superscripts(self) -> bool:
        """_{sub} / ^{sup} are rewritten unless #+OPTIONS says ^:nil"""
        return self.options.get("^") != "nil"

    def subtree_lines(self, headline: Headline) -> List[Line]:
        """
        Body lines of a headline and all of its descendants

        Descendants are the following headlines with a strictly greater
        level, up to the first one at the same or a lower level.
        """
        index = self.headlines.index(headline)
        lines = list(headline.body_lines)
        for following in self.headlines[index + 1:]:
            if following.level <= headline.level:
                break
            lines.extend(following.body_lines)
        return lines

    # Exports

    def to_html(self) -> str:
        from .exporter import Exporter
        return Exporter(self).to_html()

    def to_markdown(self) -> str:
        from .exporter import Exporter
        return Exporter(self).to_markdown()

    def to_textile(self) -> str:
        from .exporter import Exporter
        return Exporter(self).to_textile()

    # Parsing

    def lines_parse(
        self, lines: Sequence[str], depth: int = 0, base_dir: Optional[Path] = None
    ) -> None:
        """
        Run the mode state machine over lines

        Called once for the document and once more (recursively) for
        every expanded #+INCLUDE.

        Args:
            lines: Raw lines to parse
            depth: Include nesting depth of these lines
            base_dir: Directory relative include paths resolve against;
                the document base directory when None
        """
        mode = ParserMode.NORMAL
        previous_line: Optional[Line] = None
        table_header_set = False
        drawer_pending = False

        for text in lines:
            line = Line(text)

            if self.parser_options.allow_include_files:
                directive = line.include_directive
                if directive is not None:
                    # The directive line is replaced by the included lines
                    self.includeFile_expand(directive, depth, base_dir)
                    continue

            abbrev = line.link_abbrev
            if abbrev:
                self.link_abbrevs[abbrev[0]] = abbrev[1]

            # Leaving a mode
            if line.is_end_block:
                if mode == ParserMode.COMMENT or (mode in BLOCK_MODES and mode.value == line.block_type.lower()):
                    mode = ParserMode.NORMAL
            if mode == ParserMode.PROPERTY_DRAWER and line.is_property_drawer_end:
                mode = ParserMode.NORMAL
            elif drawer_pending and not line.is_property_drawer_end:
                mode = ParserMode.PROPERTY_DRAWER
            drawer_pending = False

            if mode in STRUCTURAL_MODES:
                if Headline.headline_is(line.text):
                    line = Headline(line.text, self.parser_options.offset, self.custom_keyword_regexp)
                elif line.paragraph_type == ParagraphType.TABLE_SEPARATOR:
                    if (
                        previous_line is not None
                        and previous_line.paragraph_type == ParagraphType.TABLE_ROW
                        and not table_header_set
                    ):
                        previous_line.assigned_paragraph_type = ParagraphType.TABLE_HEADER
                        table_header_set = True
                elif line.paragraph_type == ParagraphType.PROPERTY_DRAWER_ITEM:
                    line.assigned_paragraph_type = ParagraphType.PARAGRAPH
                if not line.is_table:
                    table_header_set = False

            elif mode in CODE_MODES:
                if previous_line is not None:
                    self.blockName_set(previous_line, line)
                    self.resultsBlock_mute(previous_line, line)
                # Structural syntax inside a code block is just code
                line.assigned_paragraph_type = ParagraphType.CODE

            if mode == ParserMode.NORMAL:
                if isinstance(line, Headline):
                    self.headlines.append(line)
                    self.current_headline = line

                setting = line.in_buffer_setting
                if setting:
                    self.inBufferSetting_store(setting[0].upper(), setting[1])

                if previous_line is not None:
                    self.blockName_set(previous_line, line)
                    self.resultsBlock_mute(previous_line, line)

                if line.is_begin_block:
                    if line.paragraph_type == ParagraphType.COMMENT:
                        mode = ParserMode.COMMENT
                    else:
                        mode = ParserMode(line.block_kind.value)
                        self.next_results_block_should_be_exported = line.results_block_should_be_exported
                    LOG(f"Entering {mode.value} mode: {line.text}", level=3)

                if line.is_property_drawer_begin and previous_line is not None and (
                    isinstance(previous_line, Headline) or previous_line.paragraph_type == ParagraphType.METADATA
                ):
                    drawer_pending = True

            if mode == ParserMode.PROPERTY_DRAWER and self.current_headline is not None:
                item = line.property_drawer_item
                if item:
                    self.current_headline.property_drawer[item[0]] = item[1]

            if mode != ParserMode.COMMENT:
                if self.current_headline is not None:
                    self.current_headline.body_lines.append(line)
                else:
                    self.header_lines.append(line)

            previous_line = line

    def blockName_set(self, previous_line: Line, line: Line) -> None:
        """A '#+name: id' line names the line that follows it"""
        setting = previous_line.in_buffer_setting
        if setting and setting[0].lower() == "name":
            line.properties["block_name"] = setting[1]

    def resultsBlock_mute(self, previous_line: Line, line: Line) -> None:
        """
        Hide generated results from export

        The line after '#+RESULTS:' (and every line after one muted this
        way) becomes a comment, up to the next blank line, unless the
        owning block asked for its results to be exported.
        """
        if previous_line.is_start_of_results_block or previous_line.assigned_paragraph_type == ParagraphType.COMMENT:
            if not (self.next_results_block_should_be_exported or line.is_blank):
                line.assigned_paragraph_type = ParagraphType.COMMENT

    def inBufferSetting_store(self, key: str, value: str) -> None:
        """
        Store a #+KEY: value setting

        OPTIONS is split into token:value pairs, TODO-style keys extend the
        custom keywords; everything else is kept verbatim.
        """
        if key == "OPTIONS":
            for option, option_value in OPTIONS_REGEXP.findall(value):
                if option or option_value:
                    self.options[option] = option_value
        elif TODO_SETTING_REGEXP.match(key):
            for keyword in value.split():
                keyword = re.sub(r"\(.*?\)", "", keyword)
                if keyword in ("", "|") or keyword in self.custom_keywords:
                    continue
                self.custom_keywords.append(keyword)
        else:
            self.in_buffer_settings[key] = value

    # Include files

    def includeFile_expand(
        self, directive: IncludeDirective, depth: int, base_dir: Optional[Path] = None
    ) -> None:
        """Splice the lines of an #+INCLUDE target into the current parse"""
        max_depth = self.parser_options.max_include_depth
        if max_depth is None:
            max_depth = DEFAULT_MAX_INCLUDE_DEPTH
        if depth >= max_depth:
            LOG(f"Include depth {max_depth} reached, skipping {directive.path}", level=2)
            return

        path = self.includeFile_check(directive.path, base_dir)
        if path is None:
            return

        include_lines = self.includeData_get(path, directive)
        LOG(f"Including {len(include_lines)} lines from {path}", level=2)
        self.lines_parse(include_lines, depth + 1, path.parent)

    def includeFile_check(self, path_text: str, base_dir: Optional[Path] = None) -> Optional[Path]:
        """
        Resolve an include path and check it may be included

        Relative paths resolve against base_dir, the directory of the
        including file.

        Returns:
            The resolved path, or None if the file does not exist or lies
            outside the configured include root
        """
        path = Path(path_text).expanduser()
        if not path.is_absolute():
            if base_dir is None:
                base_dir = self.parser_options.base_dir or Path.cwd()
            path = Path(base_dir) / path
        path = path.resolve()

        if not path.is_file():
            LOG(f"Include file not found: {path}", level=2)
            return None

        include_root = self.parser_options.include_root
        if include_root:
            root = Path(include_root).expanduser().resolve()
            try:
                path.relative_to(root)
            except ValueError:
                LOG(f"Include file {path} is outside of {root}", level=2)
                return None

        return path

    def includeData_get(self, path: Path, directive: IncludeDirective) -> List[str]:
        """
        Read the lines an #+INCLUDE directive asks for

        Without options the whole file is included. ':lines "a-b"' keeps
        lines a..b-1 (1-based, either end may be omitted). 'src lang',
        'example' and 'quote' wrap the file in the matching block.
        Any other option includes nothing.
        """
        try:
            file_lines = lines_split(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            LOG(f"Could not read include file {path}: {e}", level=2)
            return []

        if directive.kind is None:
            return file_lines

        kind = directive.kind.lower()
        if kind == ":lines":
            start_text, _, end_text = directive.argument.strip('"').partition("-")
            try:
                start = int(start_text) if start_text.strip() else 1
                end = int(end_text) if end_text.strip() else None
            except ValueError:
                LOG(f"Bad :lines range {directive.argument!r} for {path}", level=2)
                return []
            return file_lines[start - 1 : (end - 1 if end is not None else None)]

        if kind in ("src", "example", "quote"):
            begin_tag = f"#+BEGIN_{kind.upper()}"
            if kind == "src" and directive.argument:
                begin_tag += " " + directive.argument
            return [begin_tag, *file_lines, f"#+END_{kind.upper()}"]

        return []
