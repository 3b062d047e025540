"""
Models package for orgdown

Contains data structures and type definitions for the conversion pipeline.
"""

from .state import ProgramState, pipeline
from .line import ParagraphType, BlockKind, ExportState, IncludeDirective
from .markup import InlineFormat, OutputMode, ModeFrame
from .options import ParserOptions, ExportOptions

__all__ = [
    "ProgramState",
    "pipeline",
    "ParagraphType",
    "BlockKind",
    "ExportState",
    "IncludeDirective",
    "InlineFormat",
    "OutputMode",
    "ModeFrame",
    "ParserOptions",
    "ExportOptions",
]
