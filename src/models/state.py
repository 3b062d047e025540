"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the conversion pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, outputFormat, ...
        - env_check: inputSourceFile, outputFile, envOK
        - source_parse: parsedDocument
        - document_export: exportResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source .org file
        outputdir: Directory the converted file is written to
        verbosity: Logging verbosity level (1-3)
        inputFile: Input .org filename (relative to inputdir)
        outputFormat: "html", "markdown" or "textile"
        includeFiles: Expand #+INCLUDE (None defers to ORGDOWN_* settings)
        includeRoot: Only include files below this directory
        headlineOffset: Added to every headline level
        markupFile: YAML file overriding emphasis/symbol markup
        skipSyntaxHighlight: Plain <pre> for source blocks
        skipHeaderLines: Do not export text before the first headline
        skipTypography: Do not run the smartypants pass
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input file
        outputFile: Path the converted document is written to
        parsedDocument: Parser holding the document model
        exportResult: Export results (output_file, headline_count, format)
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    outputFormat: str = field(default="html")
    includeFiles: Optional[bool] = field(default=None)
    includeRoot: Optional[str] = field(default=None)
    headlineOffset: int = field(default=0)
    markupFile: Optional[str] = field(default=None)
    skipSyntaxHighlight: bool = field(default=False)
    skipHeaderLines: bool = field(default=False)
    skipTypography: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputFile: Path = field(default=Path("/"))
    parsedDocument: Optional[Any] = field(default=None)  # Parser at runtime
    exportResult: Optional[Dict] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, outputFormat, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for conversion output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        import dataclasses
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}

        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_parse,
            document_export,
            results_report
        )

    This is equivalent to:
        results_report(document_export(source_parse(env_check(initial_state))))
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
