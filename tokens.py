"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the lexer and a small `Token` dataclass that holds a token type, an optional
lexeme/value and the source position where the token started. Tokens are the
atomic units produced by the lexer and consumed by the parser.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    # Literals
    INTEGER = auto()
    FLOAT = auto()
    STRING = auto()
    BOOLEAN = auto()
    IDENTIFIER = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    MOD = auto()

    # Parentheses
    LPAREN = auto()
    RPAREN = auto()

    # Punctuation
    COMMA = auto()
    COLON = auto()
    ASSIGN = auto()
    BANG = auto()
    RBRACKET = auto()

    # Comparison operators
    EQ = auto()
    NEQ = auto()
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    # Logical operators
    AND = auto()
    OR = auto()
    NOT = auto()
    LOGICAL_AND = auto()
    LOGICAL_OR = auto()

    # Keywords
    BEGIN = auto()
    END = auto()
    CODE = auto()
    INT_TYPE = auto()
    CHAR_TYPE = auto()
    BOOL_TYPE = auto()
    FLOAT_TYPE = auto()
    STRING_TYPE = auto()
    DISPLAY = auto()
    SCAN = auto()
    IF = auto()
    ELSE = auto()

    # Display markers
    CONCAT = auto()
    NEWLINE = auto()
    ESCAPE = auto()

    # Special
    EOL = auto()
    EOF = auto()

    def __str__(self) -> str:
        return self.name


@dataclass
class Token:
    type: TokenType
    value: Optional[str | int | float | bool] = None
    line: int = 0
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {repr(self.value)})"

    @property
    def lexeme(self) -> str:
        if self.value is None:
            return str(self.type)
        return str(self.value)
