"""
Markdown output buffer

Emits CommonMark-style Markdown with a few GitHub extensions (fenced
code, pipe tables, ~~strike~~). Footnotes are left as written.
"""

from typing import Optional

from ..models.line import ParagraphType
from ..models.markup import InlineFormat, ModeFrame, OutputMode
from .output_buffer import OutputBuffer
from .symbols import SPECIAL_SYMBOLS


def markdown_link(href: str, label: str) -> str:
    return f"[{label}]({href})"


def markdown_image(src: str) -> str:
    return f"![{src}]({src})"


MARKDOWN_FORMAT = InlineFormat(
    name="markdown",
    emphasis={
        "*": ("**", "**"),
        "/": ("*", "*"),
        "_": ("*", "*"),
        "+": ("~~", "~~"),
    },
    code=("`", "`"),
    subscript=("<sub>", "</sub>"),
    superscript=("<sup>", "</sup>"),
    link=markdown_link,
    image=markdown_image,
    symbols=SPECIAL_SYMBOLS,
)


class MarkdownOutputBuffer(OutputBuffer):
    inline_format = MARKDOWN_FORMAT
    blank_separator = "\n"

    def list_prefix(self) -> str:
        depth = self.list_depth()
        containers = [f.mode for f in self.mode_stack if f.mode in (OutputMode.ORDERED_LIST, OutputMode.UNORDERED_LIST)]
        bullet = "1. " if containers and containers[-1] == OutputMode.ORDERED_LIST else "* "
        return "  " * (depth - 1) + bullet

    def block_emit(self, frame: Optional[ModeFrame], text: str) -> None:
        mode = frame.mode if frame else OutputMode.PARAGRAPH

        if mode == OutputMode.HEADING:
            level = getattr(self.buffer_line, "level", 1)
            self.write("#" * level + " " + self.inline_formatting(text) + "\n")
        elif mode == OutputMode.TABLE:
            self.tableRow_emit(text)
        elif mode == OutputMode.HORIZONTAL_RULE:
            self.write("---\n")
        elif mode == OutputMode.INLINE_EXAMPLE:
            self.write(f"```\n{text}\n```\n")
        elif mode == OutputMode.LIST_ITEM:
            self.write(self.list_prefix() + self.inline_formatting(text) + "\n")
        else:
            formatted = self.inline_formatting(text)
            if self.mode_in_stack(OutputMode.QUOTE):
                formatted = "\n".join("> " + line for line in formatted.split("\n"))
            self.write(formatted + "\n")

    def tableRow_emit(self, text: str) -> None:
        if self.options.skip_tables or self.buffer_line.paragraph_type == ParagraphType.TABLE_SEPARATOR:
            return
        cells = [self.inline_formatting(cell.strip()) for cell in text.strip().strip("|").split("|")]
        self.write("| " + " | ".join(cells) + " |\n")
        if self.buffer_line.paragraph_type == ParagraphType.TABLE_HEADER:
            self.write("|" + "|".join("---" for _ in cells) + "|\n")

    def code_emit(self, frame: ModeFrame, text: str) -> None:
        self.newline_ensure()
        self.write(f"```{frame.language or ''}\n{text}\n```\n")
