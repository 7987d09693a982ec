from __future__ import annotations
import argparse
import logging
import os
import subprocess
import sys
from typing import List, Optional
from graphviz import ExecutableNotFound
from lexer import Lexer
from tokens import Token
from ast_nodes import ProgramNode
from parser import Parser
from semantic_analyzer import AnalysisResult, SemanticAnalyzer
from evaluator import Evaluator
from console import Console, StdConsole
from errors import ExecutionError
from pretty_printer import PrettyPrinter
from ast_json import dump_ast
from ast_viz import render_ast_dot, write_and_render

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".CODE"

EXIT_OK = 0
EXIT_SYNTAX_ERROR = 1
EXIT_SEMANTIC_ERROR = 2
EXIT_RUNTIME_ERROR = 3
EXIT_UNREADABLE_FILE = 4


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text)
    return lexer.tokenize()


def parse_text(text: str) -> ProgramNode:
    """Parse source text into AST."""
    return Parser.from_text(text).parse()


def analyze_text(text: str) -> AnalysisResult:
    """Parse and analyze source text."""
    return SemanticAnalyzer().analyze(parse_text(text))


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="{message}",
        style="{",
    )


def resolve_program_path(path: str) -> str:
    """Return `path`, or `path` + `.CODE` when only the latter exists."""
    if not os.path.exists(path) and not os.path.splitext(path)[1]:
        candidate = path + SOURCE_SUFFIX
        if os.path.exists(candidate):
            return candidate
    return path


def load_program(path: str) -> str:
    with open(resolve_program_path(path), "r", encoding="utf-8") as fh:
        return fh.read()


def process_program(
    text: str,
    console: Optional[Console] = None,
    *,
    print_tokens: bool = False,
    print_ast: bool = False,
    dump_ast_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
) -> int:
    """Process a single program: lex, parse, analyze and run it.

    Flags control which intermediate stages are printed or written. Returns
    the process exit status.
    """
    try:
        if print_tokens:
            tokens = lex(text)
            print(f"Tokens ({len(tokens)}):")
            for i, token in enumerate(tokens[:50]):
                print(f"  {i:3}: {token}")
            if len(tokens) > 50:
                print(f"  ... and {len(tokens) - 50} more")

        program = parse_text(text)
    except SyntaxError as e:
        print(f"Syntax Error: {e}", file=sys.stderr)
        return EXIT_SYNTAX_ERROR

    result = SemanticAnalyzer().analyze(program)
    if not result.accepted:
        print("Semantic errors found:", file=sys.stderr)
        for diagnostic in result.diagnostics:
            print(f"  {diagnostic}", file=sys.stderr)
        return EXIT_SEMANTIC_ERROR
    print("Semantic analysis successful. No errors found.", file=sys.stderr)

    analyzed = result.program
    if print_ast:
        print("AST:")
        print(PrettyPrinter.print_ast(analyzed))

    if dump_ast_path:
        try:
            dump_ast(analyzed, dump_ast_path)
            print(f"Wrote AST JSON to {dump_ast_path}")
        except OSError as e:
            print(f"Failed to write AST JSON to {dump_ast_path}: {e}", file=sys.stderr)

    if viz_path:
        try:
            write_and_render(analyzed, viz_path, fmt=viz_format)
            print(f"Wrote AST visualization to {viz_path}.{viz_format}")
        except (ExecutableNotFound, subprocess.CalledProcessError, OSError):
            # fallback: write dot source
            with open(f"{viz_path}.dot", "w", encoding="utf-8") as fh:
                fh.write(render_ast_dot(analyzed).source)
            print(f"Wrote DOT to {viz_path}.dot ({viz_format} render failed)")

    try:
        Evaluator(console or StdConsole()).run(analyzed)
    except ExecutionError as e:
        print(f"Runtime Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    return EXIT_OK


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run a CODE program from a file or a filename read from stdin"
    )
    parser.add_argument("file", nargs="?", help="Path to source file to run")
    parser.add_argument(
        "--file", "-f", dest="file_option", help="Path to source file to run"
    )
    parser.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Prompt for a program name and run <name>.CODE",
    )
    # printing/verbosity options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--print-ast",
        dest="print_ast",
        action="store_true",
        help="Print the analyzed AST before running",
    )
    parser.add_argument(
        "--dump-ast", dest="dump_ast", help="Path to write the analyzed AST as JSON"
    )
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write Graphviz visualization of the AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    parser.add_argument(
        "--verbose", "-v", dest="verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    path = args.file or args.file_option
    if args.interactive:
        try:
            name = input("Enter the filename: ").strip()
        except EOFError:
            print("No filename given", file=sys.stderr)
            return EXIT_UNREADABLE_FILE
        path = name if name.endswith(SOURCE_SUFFIX) else name + SOURCE_SUFFIX
    elif not path:
        parser.print_help()
        return EXIT_OK

    logger.debug("Loading program from %s", path)
    try:
        text = load_program(path)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Failed to read file {path}: {e}", file=sys.stderr)
        return EXIT_UNREADABLE_FILE

    return process_program(
        text,
        print_tokens=args.print_tokens,
        print_ast=args.print_ast,
        dump_ast_path=args.dump_ast,
        viz_path=args.viz_ast,
        viz_format=args.viz_format,
    )


if __name__ == "__main__":
    sys.exit(main())
