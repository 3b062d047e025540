"""
HTML output buffer

Source blocks are highlighted with Pygments (inline styles, so the
output needs no stylesheet); the OrgLexer handles org blocks and unknown
languages fall back to plain text.
"""

import html
import re
from typing import List, Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.util import ClassNotFound

from ..config import appsettings
from ..models.line import ParagraphType
from ..models.markup import InlineFormat, ModeFrame, OutputMode
from .lexer import OrgLexer, get_lexer
from .log import LOG
from .output_buffer import OutputBuffer
from .regexp_helper import FootnoteHook
from .symbols import SPECIAL_SYMBOLS


LINE_BREAK_REGEXP = re.compile(r"\\\\\s*$", re.MULTILINE)


def html_escape(text: str) -> str:
    return html.escape(text, quote=False)


def html_link(href: str, label: str) -> str:
    return f'<a href="{href}">{label}</a>'


def html_image(src: str) -> str:
    return f'<img src="{src}" alt="{src}" />'


HTML_FORMAT = InlineFormat(
    name="html",
    emphasis={
        "*": ("<b>", "</b>"),
        "/": ("<i>", "</i>"),
        "_": ('<span style="text-decoration:underline;">', "</span>"),
        "+": ("<del>", "</del>"),
    },
    code=("<code>", "</code>"),
    subscript=("<sub>", "</sub>"),
    superscript=("<sup>", "</sup>"),
    link=html_link,
    image=html_image,
    escape=html_escape,
    symbols=SPECIAL_SYMBOLS,
)

CONTAINER_TAGS = {
    OutputMode.ORDERED_LIST: ("<ol>", "</ol>"),
    OutputMode.UNORDERED_LIST: ("<ul>", "</ul>"),
    OutputMode.QUOTE: ("<blockquote>", "</blockquote>"),
    OutputMode.CENTER: ('<div style="text-align: center">', "</div>"),
    OutputMode.TABLE: ("<table>", "</table>"),
}


def source_lexerGet(language: Optional[str]) -> Lexer:
    """Pygments lexer for a #+BEGIN_SRC language, plain text if unknown"""
    if not language:
        return TextLexer()
    if language.lower() in OrgLexer.aliases:
        return get_lexer()
    try:
        return get_lexer_by_name(language.lower())
    except ClassNotFound:
        LOG(f"No lexer for '{language}', highlighting as text", level=2)
        return TextLexer()


class HtmlOutputBuffer(OutputBuffer):
    """Writes HTML fragments (no <html>/<body> wrapper)"""

    inline_format = HTML_FORMAT
    blank_separator = ""
    raw_setting_key = "HTML"

    def __init__(self, options=None):
        super().__init__(options)
        self.heading_numbers: List[int] = []

    def footnote_hook(self) -> Optional[FootnoteHook]:
        return self.footnote_reference

    def footnote_reference(self, label: str, definition: Optional[str]) -> str:
        if definition:
            self.footnotes[label] = definition
        else:
            self.footnotes.setdefault(label, None)
        return f'<sup><a id="fnr.{label}" class="footref" href="#fn.{label}" role="doc-backlink">{label}</a></sup>'

    def mode_open(self, frame: ModeFrame) -> None:
        if frame.mode == OutputMode.LIST_ITEM:
            self.newline_ensure()
            self.write("<li>")
        elif frame.mode in CONTAINER_TAGS and not (frame.mode == OutputMode.TABLE and self.options.skip_tables):
            self.newline_ensure()
            self.write(CONTAINER_TAGS[frame.mode][0] + "\n")

    def mode_close(self, frame: ModeFrame) -> None:
        if frame.mode == OutputMode.LIST_ITEM:
            self.write("</li>\n")
        elif frame.mode == OutputMode.TABLE and self.options.skip_tables:
            return
        elif frame.mode in CONTAINER_TAGS:
            self.newline_ensure()
            self.write(CONTAINER_TAGS[frame.mode][1] + "\n")

    def headingNumber_next(self, level: int) -> str:
        """Section number like 2.1.3 for the next heading at level"""
        del self.heading_numbers[level:]
        while len(self.heading_numbers) < level:
            self.heading_numbers.append(0)
        self.heading_numbers[level - 1] += 1
        return ".".join(str(n) for n in self.heading_numbers)

    def heading_emit(self, text: str) -> None:
        line = self.buffer_line
        level = getattr(line, "level", 1)
        tag = f"h{min(level, 6)}"

        prefix = ""
        if self.options.export_heading_number:
            prefix += f'<span class="heading-number heading-number-{level}">{self.headingNumber_next(level)}</span> '
        keyword = getattr(line, "keyword", None)
        if keyword and self.options.export_todo:
            css = "done" if keyword == "DONE" else "todo"
            prefix += f'<span class="{css} keyword">{keyword}</span> '
        self.write(f"<{tag}>{prefix}{self.inline_formatting(text)}</{tag}>\n")

    def tableRow_emit(self, text: str) -> None:
        if self.options.skip_tables or self.buffer_line.paragraph_type == ParagraphType.TABLE_SEPARATOR:
            return
        cell_tag = "th" if self.buffer_line.paragraph_type == ParagraphType.TABLE_HEADER else "td"
        cells = text.strip().strip("|").split("|")
        row = "".join(f"<{cell_tag}>{self.inline_formatting(cell.strip())}</{cell_tag}>" for cell in cells)
        self.write(f"<tr>{row}</tr>\n")

    def block_emit(self, frame: Optional[ModeFrame], text: str) -> None:
        mode = frame.mode if frame else OutputMode.PARAGRAPH

        if mode == OutputMode.HEADING:
            self.heading_emit(text)
        elif mode == OutputMode.TABLE:
            self.tableRow_emit(text)
        elif mode == OutputMode.TITLE:
            css = ' class="title"'
            tag = "h1" if self.options.decorate_title else "p"
            self.write(f"<{tag}{css}>{self.inline_formatting(text)}</{tag}>\n")
        elif mode == OutputMode.HORIZONTAL_RULE:
            self.write("<hr />\n")
        elif mode == OutputMode.INLINE_EXAMPLE:
            self.write(f'<pre class="example">\n{html_escape(text)}\n</pre>\n')
        elif mode == OutputMode.LIST_ITEM:
            self.write(self.lineBreaks_apply(self.inline_formatting(text)))
        else:
            self.newline_ensure()
            self.write(f"<p>{self.lineBreaks_apply(self.inline_formatting(text))}</p>\n")

    @staticmethod
    def lineBreaks_apply(text: str) -> str:
        """A trailing \\\\ forces a line break"""
        return LINE_BREAK_REGEXP.sub("<br />", text)

    def code_emit(self, frame: ModeFrame, text: str) -> None:
        self.newline_ensure()
        name = frame.properties.get("block_name")
        id_attr = f' id="{html.escape(name)}"' if name else ""

        if frame.mode == OutputMode.EXAMPLE:
            self.write(f'<pre class="example"{id_attr}>\n{html_escape(text)}\n</pre>\n')
            return

        if self.options.skip_syntax_highlight:
            lang_attr = f' lang="{html.escape(frame.language)}"' if frame.language else ""
            self.write(f'<pre class="src"{lang_attr}{id_attr}>\n{html_escape(text)}\n</pre>\n')
            return

        formatter = HtmlFormatter(style=appsettings.pygments_style, noclasses=True)
        highlighted = highlight(text + "\n", source_lexerGet(frame.language), formatter)
        if id_attr:
            highlighted = f"<div{id_attr}>\n{highlighted}</div>\n"
        self.write(highlighted)

    def footnotes_output(self) -> None:
        defined = [(label, definition) for label, definition in self.footnotes.items() if definition]
        if not self.options.export_footnotes or not defined:
            return
        self.newline_ensure()
        self.write('<div id="footnotes">\n<h2 class="footnotes">Footnotes:</h2>\n<div id="text-footnotes">\n')
        for label, definition in defined:
            self.write(
                f'<div class="footdef"><sup><a id="fn.{label}" class="footnum" href="#fnr.{label}" '
                f'role="doc-backlink">{label}</a></sup> '
                f'<p class="footpara">{self.inline_formatting(definition)}</p></div>\n'
            )
        self.write("</div>\n</div>\n")
