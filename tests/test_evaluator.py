"""Tests for the tree-walking evaluator."""

import pytest
from ast_nodes import *
from console import BufferedConsole
from errors import ExecutionError
from evaluator import Evaluator, format_value, interpret_program, parse_input
from symbols import SymbolType
from tests.utils import program, run_text, run_with_values


def values_of(*lines: str, inputs=()):
    _, values = run_with_values(program(*lines), inputs)
    return values


def test_simple_arithmetic():
    assert values_of("INT x = 1 + 2 * 3")["x"] == 7


def test_zero_values_for_uninitialized_declarations():
    values = values_of("INT i", "FLOAT f", "CHAR c", "STRING s", "BOOL b")
    assert values == {"i": 0, "f": 0.0, "c": "", "s": "", "b": False}


def test_integer_division_floors():
    values = values_of("INT a = 7, b = 2, c", "c = a / b")
    assert values["c"] == 3


def test_float_division_is_true_division():
    values = values_of("FLOAT a = 7.0, c", "INT b = 2", "c = a / b")
    assert values["c"] == 3.5


def test_modulo():
    assert values_of("INT a = 17, c", "c = a % 5")["c"] == 2


def test_integer_division_and_modulo_truncate_toward_zero():
    values = values_of("INT a = 7, b = 2, q, r", "q = -a / b", "r = -a % b")
    assert values["q"] == -3
    assert values["r"] == -1


def test_float_modulo_keeps_dividend_sign():
    values = values_of("FLOAT x = 7.5, m", "m = -x % 2")
    assert values["m"] == -1.5


def test_int_result_stored_in_float_becomes_float():
    values = values_of("FLOAT f, g", "INT a = 5", "f = a + 1", "g = f / 4")
    assert isinstance(values["f"], float)
    assert values["g"] == 1.5


def test_float_declaration_with_int_initializer():
    values = values_of("INT a = 5", "FLOAT f = a + 1")
    assert values["f"] == 6.0
    assert isinstance(values["f"], float)


def test_chain_converts_per_target():
    src = program("FLOAT f", "INT i", "i = f = 5", "DISPLAY: f / 2 & \" \" & i / 2")
    console, values = run_with_values(src)
    assert isinstance(values["f"], float)
    assert values["i"] == 5 and isinstance(values["i"], int)
    assert console.lines == ["2.5 2"]


def test_division_by_zero():
    with pytest.raises(ExecutionError) as exc:
        run_text(program("INT a = 5, b = 0, c", "c = a / b"))
    assert "Division by zero" in str(exc.value)


def test_modulo_by_zero():
    with pytest.raises(ExecutionError):
        run_text(program("INT a = 5, b = 0, c", "c = a % b"))


def test_chained_assignment_sets_every_target():
    values = values_of("INT a, b, c", "a = b = c = 5")
    assert values == {"a": 5, "b": 5, "c": 5}


def test_declaration_chain():
    values = values_of("INT a = b = 4")
    assert values["a"] == 4
    assert values["b"] == 4


def test_declaration_chain_target_usable_by_later_initializers():
    values = values_of("INT a = b = 5", "INT c = b + 1")
    assert values["c"] == 6


def test_implicitly_declared_variable():
    values = values_of("INT a = 1", "b = a + 2")
    assert values["b"] == 3


def test_logical_and_comparison_results_are_booleans():
    values = values_of(
        "INT a = 3, b = 4",
        "BOOL lt, both, either, ne",
        "lt = a < b",
        "both = lt AND a == b",
        "either = lt OR a == b",
        "ne = a <> b",
    )
    assert values["lt"] is True
    assert values["both"] is False
    assert values["either"] is True
    assert values["ne"] is True


def test_unary_operators():
    values = values_of("INT a = 3, b, c", "BOOL t = \"TRUE\", f", "b = -a", "c = - -a", "f = NOT t")
    assert values["b"] == -3
    assert values["c"] == 3
    assert values["f"] is False


def test_if_branch_runs_only_when_true():
    src = program(
        "INT a = 5",
        "IF (a > 10)",
        "BEGIN IF",
        'DISPLAY: "big"',
        "END IF",
        'DISPLAY: "after"',
    )
    assert run_text(src).lines == ["after"]


def test_first_true_else_if_is_selected():
    src = program(
        "INT a = 5",
        "IF (a > 10)",
        "BEGIN IF",
        'DISPLAY: "big"',
        "END IF",
        "ELSE IF (a > 3)",
        "BEGIN IF",
        'DISPLAY: "medium"',
        "END IF",
        "ELSE IF (a > 1)",
        "BEGIN IF",
        'DISPLAY: "small"',
        "END IF",
        "ELSE",
        "BEGIN IF",
        'DISPLAY: "tiny"',
        "END IF",
    )
    assert run_text(src).lines == ["medium"]


def test_else_branch():
    src = program(
        "BOOL b",
        "IF (b)",
        "BEGIN IF",
        'DISPLAY: "yes"',
        "END IF",
        "ELSE",
        "BEGIN IF",
        'DISPLAY: "no"',
        "END IF",
    )
    assert run_text(src).lines == ["no"]


def test_nested_conditionals():
    src = program(
        "INT a = 2",
        "IF (a > 1)",
        "BEGIN IF",
        "IF (a > 5)",
        "BEGIN IF",
        'DISPLAY: "inner"',
        "END IF",
        "ELSE",
        "BEGIN IF",
        'DISPLAY: "outer"',
        "END IF",
        "END IF",
    )
    assert run_text(src).lines == ["outer"]


def test_branch_completes_before_following_statement():
    src = program(
        "INT n",
        "BOOL go = \"TRUE\"",
        "IF (go)",
        "BEGIN IF",
        "SCAN: n",
        "DISPLAY: n",
        "END IF",
        'DISPLAY: "done"',
    )
    assert run_text(src, inputs=["7"]).lines == ["7", "done"]


def test_unknown_variable_at_runtime():
    prog = ProgramNode(
        statements=[DisplayStatementNode(parts=[IdentifierNode(name="ghost")])]
    )
    with pytest.raises(ExecutionError) as exc:
        Evaluator(BufferedConsole()).run(prog)
    assert "Variable 'ghost' not found" in str(exc.value)


def test_unsupported_operator():
    prog = ProgramNode(
        declarations=[
            VariableDeclarationNode(
                var_name="x",
                var_type=SymbolType.INT,
                init_value=BinaryOpNode(
                    left=LiteralNode(value=1), operator="<<", right=LiteralNode(value=2)
                ),
            )
        ]
    )
    with pytest.raises(ExecutionError):
        interpret_program(prog, BufferedConsole())


def test_output_before_failure_is_kept():
    console = BufferedConsole()
    prog = ProgramNode(
        statements=[
            DisplayStatementNode(parts=[LiteralNode(value="first")]),
            DisplayStatementNode(
                parts=[
                    BinaryOpNode(
                        left=LiteralNode(value=1), operator="/", right=LiteralNode(value=0)
                    )
                ]
            ),
        ]
    )
    with pytest.raises(ExecutionError):
        Evaluator(console).run(prog)
    assert console.lines == ["first"]


def test_interpret_program_returns_final_values():
    prog = ProgramNode(
        declarations=[
            VariableDeclarationNode(var_name="x", var_type=SymbolType.INT, init_value=LiteralNode(value=2)),
        ],
        statements=[
            ReassignmentNode(
                name="x",
                value=BinaryOpNode(left=IdentifierNode(name="x"), operator="*", right=LiteralNode(value=21)),
            )
        ],
    )
    assert interpret_program(prog, BufferedConsole()) == {"x": 42}


def test_format_value():
    assert format_value(True) == "TRUE"
    assert format_value(False) == "FALSE"
    assert format_value(5) == "5"
    assert format_value(2.5) == "2.5"
    assert format_value(5.0) == "5"
    assert format_value(-3.0) == "-3"
    assert format_value("x") == "x"


def test_parse_input_per_type():
    assert parse_input(SymbolType.INT, "12") == 12
    assert parse_input(SymbolType.FLOAT, "1.5") == 1.5
    assert parse_input(SymbolType.BOOL, "TRUE") is True
    assert parse_input(SymbolType.CHAR, "z") == "z"
    assert parse_input(SymbolType.STRING, "two words") == "two words"


@pytest.mark.parametrize(
    "var_type,text",
    [
        (SymbolType.INT, "abc"),
        (SymbolType.INT, "1.5"),
        (SymbolType.FLOAT, "x"),
        (SymbolType.BOOL, "true"),
        (SymbolType.CHAR, "ab"),
        (SymbolType.CHAR, ""),
    ],
)
def test_parse_input_rejects_malformed_text(var_type, text):
    with pytest.raises(ExecutionError):
        parse_input(var_type, text)
