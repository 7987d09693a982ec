"""Tests for ast_viz: ensure a Digraph is produced and contains the AST."""

from ast_viz import render_ast_dot
from tests.utils import analyze_text, program


def test_ast_viz_dot_source():
    prog = analyze_text(
        program(
            "INT x = 1, y",
            "y = x + 2",
            "IF (y > 2)",
            "BEGIN IF",
            "DISPLAY: y & $",
            "END IF",
        )
    ).program
    src = render_ast_dot(prog).source

    assert "cluster_declarations" in src
    assert "cluster_statements" in src
    assert "PROGRAM" in src
    assert "VAR_DECL" in src
    assert "REASSIGNMENT" in src
    assert "CONDITIONAL" in src
    assert "IF (y &gt; 2)" in src
    assert "y &amp; $" in src
    assert "part[0]" in src
    assert "then[0]" in src


def test_ast_viz_skips_empty_sections():
    prog = analyze_text(program('DISPLAY: "only"')).program
    src = render_ast_dot(prog).source
    assert "cluster_declarations" not in src
    assert "cluster_statements" in src
