import json

from ast_json import ast_to_json, dump_ast
from pretty_printer import PrettyPrinter
from tests.utils import analyze_text, parse_text, program


SRC = program(
    "INT x = 5, y",
    "BOOL b = \"TRUE\"",
    "SCAN: y",
    "IF (x > y AND b)",
    "BEGIN IF",
    "DISPLAY: x & $ & [#]",
    "END IF",
    "ELSE",
    "BEGIN IF",
    "y = x = 1",
    "END IF",
)


def test_print_ast_tree():
    out = PrettyPrinter.print_ast(analyze_text(SRC).program)
    lines = out.split("\n")
    assert lines[0] == "Program"
    assert "    decl[0]: VarDecl(x: INT = ...)" in lines
    assert "      init: Literal(5)" in lines
    assert "    decl[1]: VarDecl(y: INT)" in lines
    assert "      init: Literal(TRUE)" in lines
    assert "    stmt[0]: Scan(y)" in lines
    assert "    stmt[1]: Conditional" in lines
    assert "        condition: BinaryOp(AND)" in out
    assert "Escape([#])" in out
    assert "Reassignment(y)" in out


def test_print_surface_expressions():
    prog = parse_text(program("INT x = (1 + 2) * -y"))
    init = prog.declarations[0].init_value
    assert PrettyPrinter.print_surface(init) == "(1 + 2) * -y"


def test_print_surface_program():
    out = PrettyPrinter.print_surface(parse_text(SRC))
    assert out.split("\n") == [
        "BEGIN CODE",
        "    INT x = 5",
        "    INT y",
        '    BOOL b = "TRUE"',
        "    SCAN: y",
        "    IF ((x > y) AND b)",
        "    BEGIN IF",
        "        DISPLAY: x & $ & [#]",
        "    END IF",
        "    ELSE",
        "    BEGIN IF",
        "        y = x = 1",
        "    END IF",
        "END CODE",
    ]


def test_ast_to_json_is_serializable():
    data = ast_to_json(analyze_text(SRC).program)
    text = json.dumps(data)
    assert data["node_type"] == "Program"
    assert data["declarations"][0] == {
        "node_type": "VarDecl",
        "var_name": "x",
        "var_type": "INT",
        "init_value": {"node_type": "Literal", "value": 5, "line": 2, "column": 9},
        "line": 2,
        "column": 5,
    }
    assert data["declarations"][2]["init_value"]["value"] is True
    cond = data["statements"][1]
    assert cond["node_type"] == "Conditional"
    assert cond["condition"]["operator"] == "AND"
    assert [p["node_type"] for p in cond["if_block"][0]["parts"]] == [
        "Identifier",
        "Concat",
        "Newline",
        "Concat",
        "Escape",
    ]
    assert cond["else_block"][0]["value"]["node_type"] == "Reassignment"
    assert '"Scan"' in text


def test_dump_ast_writes_file(tmp_path):
    out = tmp_path / "ast.json"
    dump_ast(parse_text(program("INT x")), str(out))
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["declarations"][0]["var_name"] == "x"
    assert data["declarations"][0]["init_value"] is None
