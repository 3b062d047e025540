"""
Output buffer base class

Lines are inserted one by one. Consecutive lines that form one logical
block (a paragraph, a list item and its continuation lines, the body of
a code block, a run of blank lines) accumulate in a line buffer. Any
other line first flushes the buffer to the output, then updates the mode
stack, then starts a new buffer.

The mode stack records the structural context (quote, lists, tables,
code blocks...). Pushing and popping a frame calls mode_open() and
mode_close(), which format subclasses use to emit container markup;
block_emit() and code_emit() decorate flushed content.

Subclasses provide:
    inline_format    InlineFormat of the target
    blank_separator  text emitted for a run of blank lines
    raw_setting_key  #+KEY: whose value is passed through (e.g. "HTML")
"""

import textwrap
from typing import Dict, List, Optional

from ..models.line import ParagraphType, BlockKind
from ..models.markup import (
    InlineFormat,
    OutputMode,
    ModeFrame,
    CODE_MODES,
    LIST_MODES,
    TRANSIENT_MODES,
)
from ..models.options import ExportOptions
from .line import Line
from .log import LOG
from .regexp_helper import InlineRewriter, FootnoteHook
from .symbols import markupOverrides_apply


BLOCK_KIND_MODES: Dict[BlockKind, OutputMode] = {
    BlockKind.SRC: OutputMode.SRC,
    BlockKind.EXAMPLE: OutputMode.EXAMPLE,
    BlockKind.QUOTE: OutputMode.QUOTE,
    BlockKind.HTML: OutputMode.HTML,
    BlockKind.CENTER: OutputMode.CENTER,
}

LIST_ITEM_MODES: Dict[ParagraphType, OutputMode] = {
    ParagraphType.ORDERED_LIST_ITEM: OutputMode.ORDERED_LIST,
    ParagraphType.UNORDERED_LIST_ITEM: OutputMode.UNORDERED_LIST,
}

SKIPPED_TYPES = (
    ParagraphType.COMMENT,
    ParagraphType.PROPERTY_DRAWER_DELIMITER,
    ParagraphType.PROPERTY_DRAWER_ITEM,
    ParagraphType.METADATA,
)

TABLE_TYPES = (ParagraphType.TABLE_ROW, ParagraphType.TABLE_SEPARATOR, ParagraphType.TABLE_HEADER)


class OutputBuffer:
    """
    Accumulates lines and writes one target format

    Attributes:
        options: ExportOptions of this export
        output: Emitted text chunks (see text)
        mode_stack: Open structural contexts, innermost last
        buffer: Lines of the logical block being accumulated
        buffer_line: First line of the current buffer
        output_type: Paragraph type of the last inserted line
        footnotes: Footnote label → definition (None until defined)
    """

    inline_format: InlineFormat
    blank_separator = "\n"
    raw_setting_key: Optional[str] = None

    def __init__(self, options: Optional[ExportOptions] = None):
        self.options = options or ExportOptions()
        self.output: List[str] = []
        self.mode_stack: List[ModeFrame] = []
        self.buffer: List[str] = []
        self.buffer_line: Optional[Line] = None
        self.output_type: Optional[ParagraphType] = None
        self.footnotes: Dict[str, Optional[str]] = {}

        self.inline_format = markupOverrides_apply(self.inline_format, self.options.markup_file)
        self.rewriter = InlineRewriter(
            self.inline_format,
            link_abbrevs=self.options.link_abbrevs,
            use_sub_superscripts=self.options.use_sub_superscripts,
            footnote_hook=self.footnote_hook(),
        )

    @property
    def text(self) -> str:
        return "".join(self.output)

    def write(self, text: str) -> None:
        self.output.append(text)

    def newline_ensure(self) -> None:
        """Start a new output line unless already at the start of one"""
        if self.output and not self.output[-1].endswith("\n"):
            self.write("\n")

    # Hooks for subclasses

    def footnote_hook(self) -> Optional[FootnoteHook]:
        """Footnote reference handler for the inline rewriter, if any"""
        return None

    def mode_open(self, frame: ModeFrame) -> None:
        pass

    def mode_close(self, frame: ModeFrame) -> None:
        pass

    def block_emit(self, frame: Optional[ModeFrame], text: str) -> None:
        raise NotImplementedError

    def code_emit(self, frame: ModeFrame, text: str) -> None:
        raise NotImplementedError

    def raw_emit(self, text: str) -> None:
        self.newline_ensure()
        self.write(text + "\n")

    def footnotes_output(self) -> None:
        pass

    # Mode stack

    @property
    def current_frame(self) -> Optional[ModeFrame]:
        return self.mode_stack[-1] if self.mode_stack else None

    @property
    def current_mode(self) -> Optional[OutputMode]:
        return self.mode_stack[-1].mode if self.mode_stack else None

    def mode_in_stack(self, mode: OutputMode) -> bool:
        return any(frame.mode == mode for frame in self.mode_stack)

    def mode_push(self, mode: OutputMode, indent: int = 0, properties: Optional[dict] = None,
                  language: Optional[str] = None) -> ModeFrame:
        frame = ModeFrame(mode=mode, indent=indent, properties=dict(properties or {}), language=language)
        self.mode_stack.append(frame)
        LOG(f"push_mode {mode.value} (indent {indent})", level=3)
        self.mode_open(frame)
        return frame

    def mode_pop(self) -> ModeFrame:
        frame = self.mode_stack.pop()
        LOG(f"pop_mode {frame.mode.value}", level=3)
        self.mode_close(frame)
        return frame

    def list_depth(self) -> int:
        """Number of open list items"""
        return sum(1 for frame in self.mode_stack if frame.mode == OutputMode.LIST_ITEM)

    def lists_close(self) -> None:
        while self.current_mode in LIST_MODES:
            self.mode_pop()

    def modeStack_maintain(self, line: Line) -> None:
        """
        Bring the mode stack in line with the structure of line

        Transient modes always end at a new line. An end delimiter pops
        up to and including its block. A content line closes list items
        it is not indented under, lists it does not belong to and a table
        it is not part of, then opens whatever it starts itself.
        """
        while self.current_mode in TRANSIENT_MODES:
            self.mode_pop()

        kind = line.paragraph_type
        if kind == ParagraphType.BLOCK_DELIMITER and line.is_end_block:
            block_mode = BLOCK_KIND_MODES.get(line.block_kind)
            if block_mode is not None and self.mode_in_stack(block_mode):
                while self.mode_pop().mode != block_mode:
                    pass
            return

        if kind == ParagraphType.BLANK:
            return

        self.containers_close(line)

        if kind == ParagraphType.BLOCK_DELIMITER and line.is_begin_block:
            block_mode = BLOCK_KIND_MODES.get(line.block_kind)
            if block_mode is not None:
                self.mode_push(block_mode, line.indent, line.properties, language=line.block_lang)
        elif kind in LIST_ITEM_MODES:
            container = LIST_ITEM_MODES[kind]
            frame = self.current_frame
            if frame is None or frame.mode != container or frame.indent != line.indent:
                self.mode_push(container, line.indent)
            self.mode_push(OutputMode.LIST_ITEM, line.indent, line.properties)
        elif kind in TABLE_TYPES:
            if self.current_mode != OutputMode.TABLE:
                self.mode_push(OutputMode.TABLE, line.indent)
        elif kind == ParagraphType.HEADLINE:
            self.mode_push(OutputMode.HEADING, 0, {"level": getattr(line, "level", 1)})
        elif kind == ParagraphType.HORIZONTAL_RULE:
            self.mode_push(OutputMode.HORIZONTAL_RULE, line.indent)
        elif kind == ParagraphType.INLINE_EXAMPLE:
            self.mode_push(OutputMode.INLINE_EXAMPLE, line.indent)
        elif kind == ParagraphType.TITLE:
            self.mode_push(OutputMode.TITLE)
        elif kind == ParagraphType.SETTING:
            self.mode_push(OutputMode.RAW, line.indent)
        else:
            self.mode_push(OutputMode.PARAGRAPH, line.indent, line.properties)

    def containers_close(self, line: Line) -> None:
        """Pop list and table frames that line does not continue"""
        while self.mode_stack:
            frame = self.mode_stack[-1]
            if frame.mode == OutputMode.TABLE:
                if line.is_table:
                    break
            elif frame.mode == OutputMode.LIST_ITEM:
                if line.indent > frame.indent:
                    break
            elif frame.mode in LIST_MODES:
                same_kind = LIST_ITEM_MODES.get(line.paragraph_type) == frame.mode
                if line.indent > frame.indent or (line.indent == frame.indent and same_kind):
                    break
            else:
                break
            self.mode_pop()

    # Line intake

    def line_skip(self, line: Line) -> bool:
        """Lines that produce no output of their own"""
        kind = line.paragraph_type
        if kind in SKIPPED_TYPES:
            return True
        if kind == ParagraphType.SETTING:
            setting = line.in_buffer_setting
            return not (setting and self.raw_setting_key and setting[0].upper() == self.raw_setting_key)
        if kind == ParagraphType.BLOCK_DELIMITER:
            block_mode = BLOCK_KIND_MODES.get(line.block_kind)
            if block_mode is None:
                return True
            if line.is_end_block and not self.mode_in_stack(block_mode):
                return True
        return False

    def line_accumulates(self, line: Line) -> bool:
        """True if line continues the logical block in the buffer"""
        kind = line.paragraph_type
        mode = self.current_mode

        if mode in CODE_MODES + (OutputMode.HTML,):
            return not (kind == ParagraphType.BLOCK_DELIMITER and line.is_end_block)
        if kind == ParagraphType.INLINE_EXAMPLE:
            return mode == OutputMode.INLINE_EXAMPLE
        if kind == ParagraphType.BLANK:
            return self.output_type == ParagraphType.BLANK
        if kind == ParagraphType.PARAGRAPH:
            if mode == OutputMode.PARAGRAPH:
                return self.output_type == ParagraphType.PARAGRAPH
            if mode == OutputMode.LIST_ITEM:
                return line.indent > self.current_frame.indent and self.output_type in (
                    ParagraphType.ORDERED_LIST_ITEM,
                    ParagraphType.UNORDERED_LIST_ITEM,
                    ParagraphType.PARAGRAPH,
                )
        return False

    def line_text(self, line: Line) -> str:
        if line.paragraph_type == ParagraphType.CODE:
            return line.text
        if line.paragraph_type == ParagraphType.INLINE_EXAMPLE:
            return line.output_text
        return line.output_text.strip()

    def insert(self, line: Line) -> None:
        """Feed one line to the buffer"""
        if self.line_skip(line):
            return

        kind = line.paragraph_type
        if kind == ParagraphType.FOOTNOTE_DEFINITION:
            self.flush()
            while self.current_mode in TRANSIENT_MODES:
                self.mode_pop()
            label, definition = line.footnote_definition
            self.footnotes[label] = definition
            self.output_type = kind
            return

        if self.line_accumulates(line):
            if kind != ParagraphType.BLANK or self.current_mode in CODE_MODES + (OutputMode.HTML,):
                self.buffer.append(self.line_text(line))
            else:
                # A second blank line ends all open lists
                self.lists_close()
        else:
            self.flush()
            self.modeStack_maintain(line)
            self.buffer_line = line
            if kind not in (ParagraphType.BLANK, ParagraphType.BLOCK_DELIMITER):
                self.buffer.append(self.line_text(line))
        self.output_type = kind

    def flush(self) -> None:
        """Write the accumulated block to the output"""
        frame = self.current_frame
        mode = frame.mode if frame else None

        if mode in CODE_MODES:
            if self.buffer:
                self.code_emit(frame, textwrap.dedent("\n".join(self.buffer)))
        elif mode in (OutputMode.HTML, OutputMode.RAW):
            if self.buffer:
                self.raw_emit("\n".join(self.buffer))
        elif self.buffer:
            LOG(f"flush {mode.value if mode else 'none'}: {len(self.buffer)} line(s)", level=3)
            self.block_emit(frame, "\n".join(self.buffer))
        elif self.output_type == ParagraphType.BLANK and self.output and self.blank_separator:
            # Leading blank lines produce nothing
            self.write(self.blank_separator)
        self.buffer = []

    def inline_formatting(self, text: str) -> str:
        """Rewrite inline markup of text into the target format"""
        return self.rewriter.rewrite(text)

    def modes_close(self) -> None:
        """Flush and close every open mode (end of a chunk of lines)"""
        self.flush()
        while self.mode_stack:
            self.mode_pop()
        self.output_type = None
        self.buffer_line = None

    def lines_translate(self, lines: List[Line]) -> None:
        """Insert a chunk of lines and close it"""
        self.output_type = None
        for line in lines:
            self.insert(line)
        self.modes_close()

    def finish(self) -> str:
        """Close all modes, emit footnotes and return the output"""
        self.modes_close()
        self.footnotes_output()
        return self.text
