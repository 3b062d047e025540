"""
Exporter: parsed document → HTML / Markdown / Textile

Runs export selection, then feeds the document to an output buffer chunk
by chunk: the optional title line (HTML), the header lines (unless
skipped) and every headline according to its export state:

    ALL           → all of its body lines
    HEADLINE_ONLY → only the headline line itself
    EXCLUDE       → nothing

HTML output finally goes through the smartypants typography pass
(curly quotes, dashes, ellipses) unless skip_typography_pass is set.
"""

from typing import TYPE_CHECKING, List

import smartypants

from ..models.line import ParagraphType, ExportState
from ..models.options import ExportOptions
from .html_output_buffer import HtmlOutputBuffer
from .line import Line
from .log import LOG
from .markdown_output_buffer import MarkdownOutputBuffer
from .output_buffer import OutputBuffer
from .selector import trees_markForExport
from .textile_output_buffer import TextileOutputBuffer

if TYPE_CHECKING:
    from .parser import Parser


class Exporter:
    def __init__(self, parser: "Parser"):
        self.parser = parser

    def exportOptions_build(self) -> ExportOptions:
        """ExportOptions from the document's #+OPTIONS and the parser options"""
        parser = self.parser
        return ExportOptions(
            decorate_title="TITLE" in parser.in_buffer_settings,
            export_heading_number=parser.export_heading_number,
            export_todo=parser.export_todo,
            use_sub_superscripts=parser.use_sub_superscripts,
            export_footnotes=parser.export_footnotes,
            skip_tables=not parser.export_tables,
            skip_syntax_highlight=parser.parser_options.skip_syntax_highlight,
            link_abbrevs=dict(parser.link_abbrevs),
            markup_file=parser.parser_options.markup_file,
        )

    def trees_mark(self) -> None:
        trees_markForExport(
            self.parser.headlines,
            self.parser.export_select_tags,
            self.parser.export_exclude_tags,
        )

    def headlines_translate(self, output_buffer: OutputBuffer) -> None:
        for headline in self.parser.headlines:
            if headline.export_state == ExportState.ALL:
                output_buffer.lines_translate(headline.body_lines)
            elif headline.export_state == ExportState.HEADLINE_ONLY:
                output_buffer.lines_translate(headline.body_lines[:1])

    def document_translate(self, output_buffer: OutputBuffer) -> str:
        """Header lines and headlines through output_buffer"""
        if not self.parser.skip_header_lines:
            output_buffer.lines_translate(self.parser.header_lines)
        self.headlines_translate(output_buffer)
        return output_buffer.finish()

    def to_html(self) -> str:
        self.trees_mark()
        options = self.exportOptions_build()
        output_buffer = HtmlOutputBuffer(options)

        title = self.parser.in_buffer_settings.get("TITLE")
        if title:
            output_buffer.lines_translate([Line(title, ParagraphType.TITLE)])

        output = self.document_translate(output_buffer) + "\n"
        if self.parser.parser_options.skip_typography_pass:
            return output
        LOG("Running typography pass", level=3)
        return smartypants.smartypants(output)

    def to_markdown(self) -> str:
        self.trees_mark()
        return self.document_translate(MarkdownOutputBuffer(self.exportOptions_build()))

    def to_textile(self) -> str:
        self.trees_mark()
        return self.document_translate(TextileOutputBuffer(self.exportOptions_build()))


def formats_list() -> List[str]:
    return ["html", "markdown", "textile"]
