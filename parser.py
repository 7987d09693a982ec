"""
Parser for the CODE language.

Overview and approach:
- The parser pulls tokens from a `Lexer` on demand. Its state is a single
    current token; one extra token of lookahead is available through
    `Lexer.peek_next_token()` and is used to tell `x = ...` apart from other
    statements starting with an identifier, and `ELSE IF` apart from `ELSE`.
- Statements are parsed by recursive descent. Declarations and statements are
    line-delimited, so most rules end with `expect_eol()`, which also folds
    runs of blank and comment-only lines.
- Expressions use a precedence-climbing (Pratt) loop over the table in
    `BINARY_PRECEDENCE` (higher = tighter binding):
    logical `AND OR && ||` < relational `< > <= >= == <> !=` < additive
    `+ -` < multiplicative `* / %`. Unary `+ - NOT` bind tighter than every
    binary operator. All binary operators are left-associative.

Program shape:
    BEGIN CODE
    <type> name [= init] (, name [= init])*     # declarations first
    <statement>*                                # DISPLAY, SCAN, IF, x = ...
    END CODE

Chained assignment:
    `a = b = c = 5` becomes nested `ReassignmentNode`s
    `a <- (b <- (c <- 5))`. Inside a declaration, `INT a = b = 5` gives `a`
    an `AssignmentNode(b, 5)` initializer that the analyzer resolves.

Errors:
    Every violation raises `ParseError` immediately; there is no recovery.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Dict
from tokens import Token, TokenType
from lexer import Lexer
from ast_nodes import *
from errors import ParseError
from symbols import SymbolType

logger = logging.getLogger(__name__)


TYPE_KEYWORDS: Dict[TokenType, SymbolType] = {
    TokenType.INT_TYPE: SymbolType.INT,
    TokenType.CHAR_TYPE: SymbolType.CHAR,
    TokenType.BOOL_TYPE: SymbolType.BOOL,
    TokenType.FLOAT_TYPE: SymbolType.FLOAT,
    TokenType.STRING_TYPE: SymbolType.STRING,
}

BINARY_PRECEDENCE: Dict[TokenType, int] = {
    TokenType.AND: 1,
    TokenType.OR: 1,
    TokenType.LOGICAL_AND: 1,
    TokenType.LOGICAL_OR: 1,
    TokenType.LT: 2,
    TokenType.GT: 2,
    TokenType.LTE: 2,
    TokenType.GTE: 2,
    TokenType.EQ: 2,
    TokenType.NEQ: 2,
    TokenType.PLUS: 3,
    TokenType.MINUS: 3,
    TokenType.STAR: 4,
    TokenType.SLASH: 4,
    TokenType.MOD: 4,
}

UNARY_OPERATORS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.NOT: "NOT",
}

# Tokens that can start an expression (and therefore a display part).
EXPRESSION_START = {
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.IDENTIFIER,
    TokenType.LPAREN,
    TokenType.PLUS,
    TokenType.MINUS,
    TokenType.NOT,
}


def _describe(token: Token) -> str:
    if token.type in (TokenType.EOL, TokenType.EOF):
        return str(token.type)
    return f"{token.type} '{token.lexeme}'"


class Parser:
    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current = self.lexer.get_next_token()

    @classmethod
    def from_text(cls, text: str) -> Parser:
        return cls(Lexer(text))

    def peek(self) -> Token:
        """Return the token after the current one without consuming anything."""
        return self.lexer.peek_next_token()

    def advance(self) -> Token:
        """Move to next token."""
        self.current = self.lexer.get_next_token()
        return self.current

    def error(self, message: str, expected: Optional[str] = None) -> ParseError:
        return ParseError(message, actual=self.current, expected=expected)

    def expect(self, expected_type: TokenType, message: Optional[str] = None) -> Token:
        """Expect and consume token of given type."""
        if self.current.type == expected_type:
            token = self.current
            self.advance()
            return token

        msg = message or f"Expected {expected_type} but found {_describe(self.current)}"
        raise self.error(msg, expected=str(expected_type))

    def match(self, token_type: TokenType) -> bool:
        """Check if current token matches type, consume if true."""
        if self.current.type == token_type:
            self.advance()
            return True
        return False

    def skip_eols(self) -> None:
        while self.current.type == TokenType.EOL:
            self.advance()

    def expect_eol(self) -> None:
        """Consume one line terminator and any blank lines after it."""
        self.expect(TokenType.EOL, f"Expected end of line but found {_describe(self.current)}")
        self.skip_eols()

    # Expressions

    def parse_primary(self) -> ASTNode:
        """Parse primary expressions (literals, identifiers, parenthesized)."""
        token = self.current

        match token.type:
            case TokenType.INTEGER | TokenType.FLOAT | TokenType.STRING | TokenType.BOOLEAN:
                self.advance()
                return LiteralNode(value=token.value, line=token.line, column=token.column)

            case TokenType.IDENTIFIER:
                self.advance()
                return IdentifierNode(name=token.value, line=token.line, column=token.column)

            case TokenType.LPAREN:
                self.advance()  # Consume '('
                expr = self.parse_expression()
                self.expect(TokenType.RPAREN)
                return expr

            case _:
                raise self.error(f"Unexpected token in expression: {_describe(token)}")

    def parse_unary(self) -> ASTNode:
        """Parse prefix `+`, `-` and `NOT`."""
        token = self.current
        if token.type in UNARY_OPERATORS:
            self.advance()
            operand = self.parse_unary()
            return UnaryOpNode(
                operator=UNARY_OPERATORS[token.type],
                operand=operand,
                line=token.line,
                column=token.column,
            )
        return self.parse_primary()

    def parse_binary_expression(
        self, left: ASTNode, min_precedence: int = 0
    ) -> ASTNode:
        """Parse binary expressions using Pratt parsing."""
        while True:
            token = self.current
            precedence = BINARY_PRECEDENCE.get(token.type)

            # Anything that is not a binary operator ends the expression.
            if precedence is None or precedence < min_precedence:
                break

            operator = str(token.value)
            self.advance()

            # Parse right operand with higher precedence
            right = self.parse_binary_expression(self.parse_unary(), precedence + 1)
            left = BinaryOpNode(
                left=left,
                operator=operator,
                right=right,
                line=token.line,
                column=token.column,
            )

        return left

    def parse_expression(self) -> ASTNode:
        """Parse an expression."""
        return self.parse_binary_expression(self.parse_unary())

    def parse_assignment_chain(self) -> List[ASTNode]:
        """Parse `value (= value)*` after the first `=` has been consumed.

        Every value except the last one must be a plain identifier, since it
        becomes the next target of the chain.
        """
        values = [self.parse_expression()]
        while self.current.type == TokenType.ASSIGN:
            if not isinstance(values[-1], IdentifierNode):
                raise self.error("Can only assign to identifiers")
            logger.debug("Chained assignment through '%s'", values[-1].name)
            self.advance()
            values.append(self.parse_expression())
        return values

    # Declarations

    def parse_initializer(self) -> ASTNode:
        """Parse a declaration initializer, folding chains into AssignmentNodes."""
        values = self.parse_assignment_chain()
        node = values[-1]
        for target in reversed(values[:-1]):
            node = AssignmentNode(
                name=target.name, expression=node, line=target.line, column=target.column
            )
        return node

    def parse_variable_declaration(self) -> List[VariableDeclarationNode]:
        """Parse one declaration line: type name [= init] (, name [= init])*"""
        type_token = self.current
        var_type = TYPE_KEYWORDS[type_token.type]
        self.advance()

        declarations: List[VariableDeclarationNode] = []
        while True:
            name_token = self.expect(
                TokenType.IDENTIFIER,
                f"Expected identifier after '{var_type}' but found {_describe(self.current)}",
            )
            init_value = None
            if self.match(TokenType.ASSIGN):
                init_value = self.parse_initializer()

            declarations.append(
                VariableDeclarationNode(
                    var_name=name_token.value,
                    var_type=var_type,
                    init_value=init_value,
                    line=name_token.line,
                    column=name_token.column,
                )
            )

            if not self.match(TokenType.COMMA):
                break

        self.expect_eol()
        return declarations

    # Statements

    def parse_statements(self) -> List[ASTNode]:
        """Parse statements up to the next `END` (of a block or the program)."""
        statements: List[ASTNode] = []
        while self.current.type not in (TokenType.END, TokenType.EOF):
            if self.current.type in TYPE_KEYWORDS:
                raise self.error(
                    f"Variable declarations are not allowed after statements have started: {_describe(self.current)}"
                )
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> ASTNode:
        """Parse a statement."""
        match self.current.type:
            case TokenType.DISPLAY:
                return self.parse_display_statement()

            case TokenType.SCAN:
                return self.parse_scan_statement()

            case TokenType.IF:
                return self.parse_conditional()

            case TokenType.IDENTIFIER:
                if self.peek().type != TokenType.ASSIGN:
                    token = self.current
                    self.advance()
                    raise self.error(
                        f"Expected '=' after '{token.value}' for assignment but found {_describe(self.current)}",
                        expected=str(TokenType.ASSIGN),
                    )
                return self.parse_reassignment()

            case TokenType.ELSE:
                raise self.error("ELSE without a matching IF")

            case _:
                raise self.error(f"Unexpected token at start of statement: {_describe(self.current)}")

    def parse_reassignment(self) -> ReassignmentNode:
        """Parse `name = value (= value)*` into right-folded ReassignmentNodes."""
        target = self.expect(TokenType.IDENTIFIER)
        self.expect(TokenType.ASSIGN)
        values = self.parse_assignment_chain()

        node = values[-1]
        for ident in reversed(values[:-1]):
            node = ReassignmentNode(
                name=ident.name, value=node, line=ident.line, column=ident.column
            )
        self.expect_eol()
        return ReassignmentNode(
            name=target.value, value=node, line=target.line, column=target.column
        )

    def parse_display_statement(self) -> DisplayStatementNode:
        """Parse DISPLAY: part+"""
        start = self.expect(TokenType.DISPLAY)
        self.expect(TokenType.COLON)

        parts: List[ASTNode] = []
        while True:
            token = self.current
            match token.type:
                case TokenType.CONCAT:
                    self.advance()
                    parts.append(ConcatMarkerNode(line=token.line, column=token.column))
                case TokenType.NEWLINE:
                    self.advance()
                    parts.append(NewlineMarkerNode(line=token.line, column=token.column))
                case TokenType.ESCAPE:
                    self.advance()
                    parts.append(
                        EscapeNode(char=token.value[1:-1], line=token.line, column=token.column)
                    )
                case t if t in EXPRESSION_START:
                    parts.append(self.parse_expression())
                case _:
                    break

        if not parts:
            raise self.error(f"Expected display part after 'DISPLAY:' but found {_describe(self.current)}")
        self.expect_eol()
        return DisplayStatementNode(parts=parts, line=start.line, column=start.column)

    def parse_scan_statement(self) -> ScanStatementNode:
        """Parse SCAN: name (, name)*"""
        start = self.expect(TokenType.SCAN)
        self.expect(TokenType.COLON)

        names = [self.expect(TokenType.IDENTIFIER).value]
        while self.match(TokenType.COMMA):
            names.append(self.expect(TokenType.IDENTIFIER).value)

        self.expect_eol()
        return ScanStatementNode(variable_names=names, line=start.line, column=start.column)

    def parse_if_body(self) -> List[ASTNode]:
        """Parse `EOL BEGIN IF EOL statements END IF EOL` after a condition."""
        self.expect_eol()
        self.expect(TokenType.BEGIN)
        self.expect(TokenType.IF)
        self.expect_eol()
        statements = self.parse_statements()
        self.expect(TokenType.END)
        self.expect(TokenType.IF)
        self.expect_eol()
        return statements

    def parse_conditional(self) -> ConditionalNode:
        """Parse IF / ELSE IF / ELSE with their BEGIN IF ... END IF blocks."""
        start = self.expect(TokenType.IF)
        condition = self.parse_expression()
        if_block = self.parse_if_body()

        else_if_blocks: List[ElseIfBlockNode] = []
        while self.current.type == TokenType.ELSE and self.peek().type == TokenType.IF:
            else_token = self.current
            self.advance()
            self.advance()
            else_if_condition = self.parse_expression()
            else_if_blocks.append(
                ElseIfBlockNode(
                    condition=else_if_condition,
                    statements=self.parse_if_body(),
                    line=else_token.line,
                    column=else_token.column,
                )
            )

        else_block = None
        if self.match(TokenType.ELSE):
            else_block = self.parse_if_body()

        return ConditionalNode(
            condition=condition,
            if_block=if_block,
            else_if_blocks=else_if_blocks,
            else_block=else_block,
            line=start.line,
            column=start.column,
        )

    # Program

    def parse_program(self) -> ProgramNode:
        """Parse a complete program: BEGIN CODE declarations statements END CODE"""
        self.skip_eols()
        start = self.expect(TokenType.BEGIN)
        self.expect(TokenType.CODE)
        self.expect_eol()

        declarations: List[VariableDeclarationNode] = []
        while self.current.type in TYPE_KEYWORDS:
            declarations.extend(self.parse_variable_declaration())

        statements = self.parse_statements()

        self.expect(TokenType.END)
        self.expect(TokenType.CODE)
        self.skip_eols()
        if self.current.type != TokenType.EOF:
            raise self.error(f"Unexpected token after 'END CODE': {_describe(self.current)}")

        logger.debug(
            "Parsed %d declarations and %d statements", len(declarations), len(statements)
        )
        return ProgramNode(
            declarations=declarations,
            statements=statements,
            line=start.line,
            column=start.column,
        )

    def parse(self) -> ProgramNode:
        return self.parse_program()
