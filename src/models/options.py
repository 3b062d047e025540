"""
Parser and exporter option models

Plain dataclasses carried through a conversion. ParserOptions is what a
caller passes to Parser; ExportOptions is derived from the parsed document
by the Exporter and handed to an output buffer.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional


@dataclass
class ParserOptions:
    """
    Options recognized by the Parser and Exporter

    Attributes:
        allow_include_files: Expand #+INCLUDE directives. None means "not
                             decided"; options_resolve() turns it into a bool
                             from the environment, the Parser treats it as False
        include_root: Only include files below this directory
        offset: Added to every headline level (propagates into includes)
        skip_syntax_highlight: Emit plain <pre> for source blocks
        skip_header_lines: Do not export text before the first headline
        skip_typography_pass: Do not run smartypants over the HTML output
        markup_file: YAML file overriding emphasis/symbol markup
        max_include_depth: Nesting limit for includes (None = settings default)
        base_dir: Directory relative include paths are resolved against
    """
    allow_include_files: Optional[bool] = None
    include_root: Optional[str] = None
    offset: int = 0
    skip_syntax_highlight: bool = False
    skip_header_lines: bool = False
    skip_typography_pass: bool = False
    markup_file: Optional[str] = None
    max_include_depth: Optional[int] = None
    base_dir: Optional[Path] = None


@dataclass
class ExportOptions:
    """
    Per-export options handed to an output buffer

    Built by the Exporter from the document's #+OPTIONS and the caller's
    ParserOptions.
    """
    decorate_title: bool = False
    export_heading_number: bool = False
    export_todo: bool = False
    use_sub_superscripts: bool = True
    export_footnotes: bool = False
    skip_tables: bool = False
    skip_syntax_highlight: bool = False
    link_abbrevs: Dict[str, str] = field(default_factory=dict)
    markup_file: Optional[str] = None
