"""
Textile output buffer
"""

from typing import Optional

from ..models.line import ParagraphType
from ..models.markup import InlineFormat, ModeFrame, OutputMode
from .output_buffer import OutputBuffer
from .regexp_helper import FootnoteHook
from .symbols import SPECIAL_SYMBOLS


def textile_link(href: str, label: str) -> str:
    return f'"{label}":{href}'


def textile_image(src: str) -> str:
    return f"!{src}!"


TEXTILE_FORMAT = InlineFormat(
    name="textile",
    emphasis={
        "*": ("*", "*"),
        "/": ("_", "_"),
        "_": ("_", "_"),
        "+": ("+", "+"),
    },
    code=("@", "@"),
    subscript=("~", "~"),
    superscript=("^", "^"),
    link=textile_link,
    image=textile_image,
    symbols=SPECIAL_SYMBOLS,
)


class TextileOutputBuffer(OutputBuffer):
    inline_format = TEXTILE_FORMAT
    blank_separator = "\n"

    def footnote_hook(self) -> Optional[FootnoteHook]:
        return self.footnote_reference

    def footnote_reference(self, label: str, definition: Optional[str]) -> str:
        if definition:
            self.footnotes[label] = definition
        else:
            self.footnotes.setdefault(label, None)
        return f"[{label}]"

    def list_prefix(self) -> str:
        bullets = "".join(
            "#" if frame.mode == OutputMode.ORDERED_LIST else "*"
            for frame in self.mode_stack
            if frame.mode in (OutputMode.ORDERED_LIST, OutputMode.UNORDERED_LIST)
        )
        return (bullets or "*") + " "

    def block_emit(self, frame: Optional[ModeFrame], text: str) -> None:
        mode = frame.mode if frame else OutputMode.PARAGRAPH

        if mode == OutputMode.HEADING:
            level = getattr(self.buffer_line, "level", 1)
            self.write(f"h{min(level, 6)}. {self.inline_formatting(text)}\n")
        elif mode == OutputMode.TABLE:
            skipped = self.options.skip_tables or self.buffer_line.paragraph_type == ParagraphType.TABLE_SEPARATOR
            if not skipped:
                cells = [self.inline_formatting(cell.strip()) for cell in text.strip().strip("|").split("|")]
                self.write("|" + "|".join(cells) + "|\n")
        elif mode == OutputMode.HORIZONTAL_RULE:
            self.write("<hr />\n")
        elif mode == OutputMode.INLINE_EXAMPLE:
            self.write(f"bc. {text}\n")
        elif mode == OutputMode.LIST_ITEM:
            self.write(self.list_prefix() + self.inline_formatting(text) + "\n")
        else:
            if self.mode_in_stack(OutputMode.QUOTE):
                self.write("bq. ")
            elif self.mode_in_stack(OutputMode.CENTER):
                self.write("p=. ")
            self.write(self.inline_formatting(text) + "\n")

    def code_emit(self, frame: ModeFrame, text: str) -> None:
        self.newline_ensure()
        self.write(f"bc. {text}\n")

    def footnotes_output(self) -> None:
        defined = [(label, definition) for label, definition in self.footnotes.items() if definition]
        if not defined:
            return
        self.newline_ensure()
        for label, definition in defined:
            self.write(f"\nfn{label}. {self.inline_formatting(definition)}\n")
