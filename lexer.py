"""
Lexer for the CODE pseudocode language.

Overview:
- This module implements a small hand-written lexical analyzer (scanner) that
    transforms program text into `Token` objects defined in `tokens.py`, one
    token per call to `get_next_token()`.
- It recognizes the upper-case keywords (`BEGIN`, `END`, `CODE`, `INT`,
    `CHAR`, `BOOL`, `FLOAT`, `STRING`, `DISPLAY`, `SCAN`, `AND`, `OR`, `NOT`,
    `IF`, `ELSE`), identifiers, integer and float literals, quoted strings,
    the boolean literals `true`/`false`, single- and two-character operators
    (`<=`, `>=`, `==`, `<>`, `!=`, `&&`, `||`) and punctuation.
- Line breaks are significant: every `\\n` becomes an `EOL` token because
    declarations and statements are line-delimited. Other whitespace and
    `#` comments are skipped.
- `DISPLAY` helpers get their own tokens: `&` (CONCAT), `$` (NEWLINE) and
    the bracket escape `[x]` (ESCAPE) which writes a reserved character
    literally.

Examples:
    Input:  "INT x = 5"
    Tokens: [INT_TYPE, IDENTIFIER('x'), ASSIGN, INTEGER(5), EOF]

Implementation notes:
- The lexer is a simple stateful scanner using `self.pos` and `self.current_char`.
- Two-character operators are checked before the single-character table.
- `peek_next_token()` saves and restores the scanner state, so the parser
    can look one token past its current token without consuming anything.
"""

from __future__ import annotations
import logging
from typing import Optional, List, Tuple
from tokens import Token, TokenType
from errors import LexError

logger = logging.getLogger(__name__)


KEYWORDS = {
    "BEGIN": TokenType.BEGIN,
    "END": TokenType.END,
    "CODE": TokenType.CODE,
    "INT": TokenType.INT_TYPE,
    "CHAR": TokenType.CHAR_TYPE,
    "BOOL": TokenType.BOOL_TYPE,
    "FLOAT": TokenType.FLOAT_TYPE,
    "STRING": TokenType.STRING_TYPE,
    "DISPLAY": TokenType.DISPLAY,
    "SCAN": TokenType.SCAN,
    "AND": TokenType.AND,
    "OR": TokenType.OR,
    "NOT": TokenType.NOT,
    "IF": TokenType.IF,
    "ELSE": TokenType.ELSE,
}

TWO_CHAR_OPERATORS = {
    "<=": TokenType.LTE,
    ">=": TokenType.GTE,
    "==": TokenType.EQ,
    "<>": TokenType.NEQ,
    "!=": TokenType.NEQ,
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
}

SINGLE_CHAR_OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.MOD,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    "=": TokenType.ASSIGN,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "!": TokenType.BANG,
    "]": TokenType.RBRACKET,
}


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.current_char = self.text[self.pos] if self.text else None

    def error(self, message: str = "") -> LexError:
        return LexError(message, self.line, self.column)

    def advance(self) -> None:
        """Advance to next character."""
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek_char(self) -> Optional[str]:
        """Look at next character without consuming it."""
        next_pos = self.pos + 1
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def _save(self) -> Tuple[int, int, int, Optional[str]]:
        return self.pos, self.line, self.column, self.current_char

    def _restore(self, state: Tuple[int, int, int, Optional[str]]) -> None:
        self.pos, self.line, self.column, self.current_char = state

    def peek_next_token(self) -> Token:
        """Return the next token without moving the scanner."""
        state = self._save()
        try:
            return self.get_next_token()
        finally:
            self._restore(state)

    def skip_whitespace(self) -> None:
        """Skip whitespace other than line breaks."""
        while (
            self.current_char is not None
            and self.current_char.isspace()
            and self.current_char != "\n"
        ):
            self.advance()

    def skip_comment(self) -> None:
        """Skip a `#` comment up to (not including) the line break."""
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def number(self) -> Token:
        """Parse an integer or float literal."""
        line, column = self.line, self.column
        result = []
        seen_dot = False

        while self.current_char is not None and (
            self.current_char.isdecimal() or self.current_char == "."
        ):
            if self.current_char == ".":
                if seen_dot:
                    raise self.error("Multiple decimal points in numeric literal")
                seen_dot = True
            result.append(self.current_char)
            self.advance()

        text = "".join(result)
        if seen_dot:
            return Token(TokenType.FLOAT, float(text), line, column)
        return Token(TokenType.INTEGER, int(text), line, column)

    def string(self) -> Token:
        """Parse a single- or double-quoted string literal."""
        line, column = self.line, self.column
        quote = self.current_char
        self.advance()
        result = []

        while self.current_char != quote:
            if self.current_char is None:
                raise LexError(f"Unclosed string: {quote}", line, column)
            result.append(self.current_char)
            self.advance()

        self.advance()  # closing quote
        return Token(TokenType.STRING, "".join(result), line, column)

    def escape(self) -> Token:
        """Parse a bracket escape `[x]`."""
        line, column = self.line, self.column
        self.advance()  # '['
        char = self.current_char
        if char is None:
            raise self.error("Unterminated escape sequence")
        self.advance()
        if self.current_char != "]":
            raise self.error(f"Escape sequence '[{char}' must be closed by ']'")
        self.advance()
        return Token(TokenType.ESCAPE, f"[{char}]", line, column)

    def identifier(self) -> str:
        """Parse an identifier or keyword."""
        result = []

        # Following characters can be letters, digits, or underscores.
        while self.current_char is not None and (
            self.current_char.isalnum() or self.current_char == "_"
        ):
            result.append(self.current_char)
            self.advance()

        return "".join(result)

    def get_next_token(self) -> Token:
        """Lexical analyzer that returns tokens one at a time."""
        while self.current_char is not None:
            line, column = self.line, self.column

            if self.current_char == "\n":
                self.advance()
                return Token(TokenType.EOL, "\n", line, column)

            if self.current_char.isspace():
                self.skip_whitespace()
                continue

            if self.current_char == "#":
                self.skip_comment()
                continue

            match self.current_char:
                case "$":
                    self.advance()
                    return Token(TokenType.NEWLINE, "$", line, column)
                case "[":
                    return self.escape()
                case "'" | '"':
                    return self.string()

            # Handle two-character operators first so `<=` is not lexed as `<` `=`
            # and `&&` is not lexed as two concatenation markers.
            pair = self.current_char + (self.peek_char() or "")
            if pair in TWO_CHAR_OPERATORS:
                self.advance()
                self.advance()
                return Token(TWO_CHAR_OPERATORS[pair], pair, line, column)

            if self.current_char == "&":
                self.advance()
                return Token(TokenType.CONCAT, "&", line, column)

            if self.current_char in SINGLE_CHAR_OPERATORS:
                char = self.current_char
                self.advance()
                return Token(SINGLE_CHAR_OPERATORS[char], char, line, column)

            if self.current_char.isdecimal():
                return self.number()

            # Identifiers and keywords: scan an identifier and map it to a
            # keyword or boolean literal when it matches one exactly.
            if self.current_char.isalpha() or self.current_char == "_":
                ident = self.identifier()
                if ident in ("true", "false"):
                    return Token(TokenType.BOOLEAN, ident == "true", line, column)
                token_type = KEYWORDS.get(ident, TokenType.IDENTIFIER)
                return Token(token_type, ident, line, column)

            raise self.error(f"Unexpected character '{self.current_char}'")

        return Token(TokenType.EOF, None, self.line, self.column)

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input string."""
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        logger.debug("Tokenized %d tokens", len(tokens))
        return tokens
