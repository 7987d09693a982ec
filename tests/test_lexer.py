import pytest
from errors import LexError
from lexer import Lexer
from main import lex
from tokens import TokenType


def types_of(src):
    return [t.type for t in lex(src)]


def test_lexer_recognizes_keywords_and_punctuation():
    src = "BEGIN CODE\nINT x = 5, y\nDISPLAY: x & $\nEND CODE"
    types = types_of(src)

    assert types[:3] == [TokenType.BEGIN, TokenType.CODE, TokenType.EOL]
    assert TokenType.INT_TYPE in types
    assert TokenType.IDENTIFIER in types
    assert TokenType.ASSIGN in types
    assert TokenType.COMMA in types
    assert TokenType.DISPLAY in types
    assert TokenType.COLON in types
    assert TokenType.CONCAT in types
    assert TokenType.NEWLINE in types
    assert types[-3:] == [TokenType.END, TokenType.CODE, TokenType.EOF]


def test_simple_declaration_tokens():
    tokens = lex("INT x = 5")
    assert [t.type for t in tokens] == [
        TokenType.INT_TYPE,
        TokenType.IDENTIFIER,
        TokenType.ASSIGN,
        TokenType.INTEGER,
        TokenType.EOF,
    ]
    assert tokens[1].value == "x"
    assert tokens[3].value == 5


def test_numbers():
    tokens = lex("42 3.25 7.")
    assert tokens[0].type == TokenType.INTEGER and tokens[0].value == 42
    assert tokens[1].type == TokenType.FLOAT and tokens[1].value == 3.25
    assert tokens[2].type == TokenType.FLOAT and tokens[2].value == 7.0


def test_multiple_decimal_points_rejected():
    with pytest.raises(LexError):
        lex("1.2.3")


def test_two_char_operators_before_single():
    assert types_of("a <= b >= c == d <> e != f && g || h")[1::2] == [
        TokenType.LTE,
        TokenType.GTE,
        TokenType.EQ,
        TokenType.NEQ,
        TokenType.NEQ,
        TokenType.LOGICAL_AND,
        TokenType.LOGICAL_OR,
        TokenType.EOF,
    ]


def test_single_ampersand_is_concat():
    assert types_of("a & b") == [
        TokenType.IDENTIFIER,
        TokenType.CONCAT,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]


def test_strings_with_either_quote():
    tokens = lex("\"hello world\" 'c'")
    assert tokens[0].type == TokenType.STRING and tokens[0].value == "hello world"
    assert tokens[1].type == TokenType.STRING and tokens[1].value == "c"


def test_unclosed_string():
    with pytest.raises(LexError) as exc:
        lex('"never closed')
    assert "Unclosed string" in str(exc.value)


def test_bracket_escape():
    tokens = lex("[#]")
    assert tokens[0].type == TokenType.ESCAPE
    assert tokens[0].value == "[#]"


def test_bracket_escape_requires_closing_bracket():
    with pytest.raises(LexError):
        lex("[ab]")


def test_boolean_literals_and_keywords():
    tokens = lex("true false AND OR NOT")
    assert tokens[0].type == TokenType.BOOLEAN and tokens[0].value is True
    assert tokens[1].type == TokenType.BOOLEAN and tokens[1].value is False
    assert [t.type for t in tokens[2:5]] == [TokenType.AND, TokenType.OR, TokenType.NOT]


def test_keywords_are_case_sensitive():
    tokens = lex("display Display DISPLAY")
    assert [t.type for t in tokens[:3]] == [
        TokenType.IDENTIFIER,
        TokenType.IDENTIFIER,
        TokenType.DISPLAY,
    ]


def test_comment_runs_to_end_of_line_and_keeps_eol():
    assert types_of("x # a comment = 5\ny") == [
        TokenType.IDENTIFIER,
        TokenType.EOL,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]


def test_positions_are_tracked():
    tokens = lex("INT x\n  y")
    y = tokens[3]
    assert y.value == "y"
    assert (y.line, y.column) == (2, 3)


def test_unexpected_character():
    with pytest.raises(LexError) as exc:
        lex("x @ y")
    assert "Unexpected character '@'" in str(exc.value)
    assert exc.value.column == 3


def test_peek_does_not_consume():
    lexer = Lexer("x = 1")
    assert lexer.peek_next_token().type == TokenType.IDENTIFIER
    assert lexer.get_next_token().type == TokenType.IDENTIFIER
    assert lexer.peek_next_token().type == TokenType.ASSIGN
    assert lexer.get_next_token().type == TokenType.ASSIGN


def test_end_of_input_keeps_returning_eof():
    lexer = Lexer("")
    assert lexer.get_next_token().type == TokenType.EOF
    assert lexer.get_next_token().type == TokenType.EOF
