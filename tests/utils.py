from typing import Any, Dict, Iterable

from lexer import Lexer
from parser import Parser
from semantic_analyzer import AnalysisResult, SemanticAnalyzer
from evaluator import Evaluator
from console import BufferedConsole


def lex(text: str):
    """Return a list of tokens for the given source text."""
    return Lexer(text).tokenize()


def parse_text(text: str):
    """Convenience: lex+parse a source text into an AST."""
    return Parser(Lexer(text)).parse()


def analyze_text(text: str) -> AnalysisResult:
    return SemanticAnalyzer().analyze(parse_text(text))


def program(*lines: str) -> str:
    """Wrap body lines in BEGIN CODE / END CODE."""
    return "\n".join(("BEGIN CODE",) + lines + ("END CODE",)) + "\n"


def run_text(text: str, inputs: Iterable[str] = ()) -> BufferedConsole:
    """Analyze and run a program; return the console with its output."""
    console, _ = run_with_values(text, inputs)
    return console


def run_with_values(text: str, inputs: Iterable[str] = ()):
    result = analyze_text(text)
    assert result.accepted, result.diagnostics
    console = BufferedConsole(inputs)
    evaluator = Evaluator(console)
    evaluator.run(result.program)
    values: Dict[str, Any] = evaluator.symbols.values()
    return console, values
