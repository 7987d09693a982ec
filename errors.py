"""Errors raised by the interpreter pipeline.

Lexical and syntax errors are `SyntaxError` subclasses and abort the pipeline
before analysis. Runtime failures are `RuntimeError` subclasses and abort a
running program. Semantic problems are not exceptions at all: the analyzer
collects them as diagnostic strings.
"""

from __future__ import annotations
from typing import Optional

from tokens import Token


class LexError(SyntaxError):
    """Error for characters or literals the lexer cannot tokenize."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.line = line
        self.column = column
        super().__init__(
            f"Lexical error at line {line}, column {column}: {message}"
        )


class ParseError(SyntaxError):
    """Error for a token the grammar does not allow at the current position."""

    def __init__(
        self,
        message: str,
        actual: Optional[Token] = None,
        expected: Optional[str] = None,
    ):
        self.actual = actual
        self.expected = expected
        if actual is not None and actual.line:
            message = f"{message} (line {actual.line}, column {actual.column})"
        super().__init__(message)


class ExecutionError(RuntimeError):
    """Error raised while evaluating an analyzed program."""


class AnalyzerTypeError(TypeError):
    """Internal failure of expression type inference."""
