#!/usr/bin/env python3
"""
orgdown - Org-style outline markup converter

Converts a plain-text outline document (headlines, lists, tables, source
blocks, in-buffer settings) to HTML, Markdown or Textile.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    orgdown inputdir/ outputdir/ --inputFile notes.org

    The converted document is written to outputdir/ with the extension of
    the chosen format (notes.html, notes.md, notes.textile).

Examples:
    # HTML with highlighted source blocks
    orgdown . output/ --inputFile notes.org

    # Markdown, expanding #+INCLUDE files below the input directory
    orgdown . output/ --inputFile notes.org --outputFormat markdown --includeFiles --includeRoot .

    # Verbose output
    orgdown . output/ --inputFile notes.org -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter, BooleanOptionalAction

from chris_plugin import chris_plugin
from .config import options_resolve
from .lib import Parser, __version__, LOG, state_connectToLogger
from .lib.exporter import formats_list
from .models import ProgramState, ParserOptions, pipeline


FORMAT_EXTENSIONS = {"html": ".html", "markdown": ".md", "textile": ".textile"}

# Define CLI arguments
parser = ArgumentParser(
    description="orgdown - Convert org-style outline documents to HTML, Markdown or Textile",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input outline (.org) file (relative to inputdir)"
)

parser.add_argument(
    "--outputFormat",
    default="html",
    choices=formats_list(),
    help="Target markup language",
)

parser.add_argument(
    "--includeFiles",
    default=None,
    action=BooleanOptionalAction,
    help="Expand #+INCLUDE directives, or never expand them with --no-includeFiles "
    "(default: decided by ORGDOWN_ENABLE_INCLUDE_FILES / ORGDOWN_INCLUDE_ROOT)",
)

parser.add_argument(
    "--includeRoot",
    default=None,
    type=str,
    help="Only include files below this directory",
)

parser.add_argument(
    "--headlineOffset",
    default=0,
    type=int,
    help="Number added to every headline level",
)

parser.add_argument(
    "--markupFile",
    default=None,
    type=str,
    help="YAML file overriding emphasis and symbol markup",
)

parser.add_argument(
    "--skipSyntaxHighlight",
    default=False,
    action="store_true",
    help="Emit source blocks as plain <pre> instead of highlighting them",
)

parser.add_argument(
    "--skipHeaderLines",
    default=False,
    action="store_true",
    help="Do not export the text before the first headline",
)

parser.add_argument(
    "--skipTypography",
    default=False,
    action="store_true",
    help="Do not apply smart quotes and dashes to HTML output",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input file
            - outputFile: Path of the converted document
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """

    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputFile = state.outputdir / (input_file.stem + FORMAT_EXTENSIONS[state.outputFormat])
    LOG(f"Output file: {state.outputFile}", level=2)

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read and parse the outline source file into a document model.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added field:
            - parsedDocument: Parser holding headlines, settings and lines

    Exits:
        1 if the file cannot be read
    """

    state = inputstate.copy()

    LOG("Parsing source document...", level=1)

    options = options_resolve(
        ParserOptions(
            allow_include_files=state.includeFiles,
            include_root=state.includeRoot,
            offset=state.headlineOffset,
            markup_file=state.markupFile,
            skip_syntax_highlight=state.skipSyntaxHighlight,
            skip_header_lines=state.skipHeaderLines,
            skip_typography_pass=state.skipTypography,
        )
    )

    try:
        state.parsedDocument = Parser.load(state.inputSourceFile, options)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Parsed {len(state.parsedDocument.headlines)} headlines", level=2)
    return state


def document_export(inputstate: ProgramState) -> ProgramState:
    """
    Export the parsed document and write it to the output file.

    Args:
        inputstate: Program state with parsedDocument

    Returns:
        ProgramState with added field:
            - exportResult: Dict containing:
                - output_file: str (path to the written document)
                - headline_count: int (number of headlines in the source)
                - format: str (target markup language)

    Exits:
        1 if parsedDocument is None or writing fails
    """

    state = inputstate.copy()

    LOG(f"Exporting to {state.outputFormat}...", level=1)

    if state.parsedDocument is None:
        print("Error: No parsed document available", file=sys.stderr)
        sys.exit(1)

    exporters = {
        "html": state.parsedDocument.to_html,
        "markdown": state.parsedDocument.to_markdown,
        "textile": state.parsedDocument.to_textile,
    }

    try:
        output = exporters[state.outputFormat]()
        state.outputFile.write_text(output, encoding="utf-8")
    except OSError as e:
        print(f"Export error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.exportResult = {
        "output_file": str(state.outputFile),
        "headline_count": len(state.parsedDocument.headlines),
        "format": state.outputFormat,
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display export results to the user.

    Args:
        inputstate: Program state with exportResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if exportResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.exportResult:
        print("Error: Export failed", file=sys.stderr)
        sys.exit(1)

    LOG("\n✓ Conversion successful!", level=1)
    LOG(f"  Output: {state.exportResult['output_file']}", level=1)
    LOG(f"  Format: {state.exportResult['format']}", level=1)
    LOG(f"  Headlines: {state.exportResult['headline_count']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="orgdown - Org-style outline markup converter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert an outline document to the chosen format.

    Orchestrates the full conversion pipeline:
        1. env_check: Validate paths and environment
        2. source_parse: Read and parse the .org file
        3. document_export: Export and write the converted document
        4. results_report: Display results to user

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, document_export, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
