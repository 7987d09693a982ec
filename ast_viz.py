"""Graphviz visualization helpers for the AST.

Provides `render_ast_dot(program)` which returns a `graphviz.Digraph` object
(not rendered). `write_and_render` writes and renders the graph to disk.

Layout: declarations and statements are drawn in two clusters hanging off
the program node. Each AST node becomes an HTML-like table with the node
kind in bold and its surface syntax underneath; edges carry the name of the
child field (`left`, `init`, `part[2]`, ...).
"""

import html
from itertools import count
from typing import Iterator, List, Optional, Tuple
from graphviz import Digraph
from ast_nodes import *
from pretty_printer import PrettyPrinter


def _children(node: ASTNode) -> List[Tuple[str, ASTNode]]:
    """Return (edge label, child) pairs in source order."""
    match node:
        case BinaryOpNode(left=l, right=r):
            return [("left", l), ("right", r)]
        case UnaryOpNode(operand=operand):
            return [("operand", operand)]
        case DisplayStatementNode(parts=parts):
            return [(f"part[{i}]", p) for i, p in enumerate(parts)]
        case ReassignmentNode(value=value):
            return [("value", value)]
        case AssignmentNode(expression=expr):
            return [("expr", expr)]
        case ElseIfBlockNode(condition=cond, statements=stmts):
            return [("condition", cond)] + [(f"stmt[{i}]", s) for i, s in enumerate(stmts)]
        case ConditionalNode(
            condition=cond, if_block=if_b, else_if_blocks=elifs, else_block=else_b
        ):
            pairs = [("condition", cond)]
            pairs += [(f"then[{i}]", s) for i, s in enumerate(if_b)]
            pairs += [(f"else_if[{i}]", b) for i, b in enumerate(elifs)]
            pairs += [(f"else[{i}]", s) for i, s in enumerate(else_b or [])]
            return pairs
        case VariableDeclarationNode(init_value=init) if init is not None:
            return [("init", init)]
        case _:
            return []


def _node_html(node: ASTNode) -> str:
    match node:
        case ConditionalNode(condition=cond):
            text = f"IF ({PrettyPrinter.print_surface(cond)})"
        case ElseIfBlockNode(condition=cond):
            text = f"ELSE IF ({PrettyPrinter.print_surface(cond)})"
        case _:
            text = PrettyPrinter.print_surface(node)
    escaped = html.escape(text).replace("\n", "<br/>")
    # Avoid empty FONT elements which some Graphviz versions reject
    if not escaped.strip():
        escaped = "&nbsp;"
    kind = html.escape(str(node.type))
    return (
        '<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0">'
        f"<TR><TD><B>{kind}</B></TD></TR>"
        f'<TR><TD><FONT POINT-SIZE="10">{escaped}</FONT></TD></TR>'
        "</TABLE>>"
    )


def _emit(graph: Digraph, node: ASTNode, ids: Iterator[int]) -> str:
    """Add `node` and its subtree to `graph`; return the node's id."""
    node_id = f"n{next(ids)}"
    graph.node(node_id, label=_node_html(node), shape="plaintext")
    for label, child in _children(node):
        child_id = _emit(graph, child, ids)
        graph.edge(node_id, child_id, label=label)
    return node_id


def render_ast_dot(program: ProgramNode) -> Digraph:
    """Return a graphviz.Digraph for the given program.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")
    ids = count()

    root = f"n{next(ids)}"
    dot.node(root, label="<<B>PROGRAM</B>>", shape="box", style="rounded")

    for cluster, label, nodes in (
        ("cluster_declarations", "declarations", program.declarations),
        ("cluster_statements", "statements", program.statements),
    ):
        if not nodes:
            continue
        with dot.subgraph(name=cluster) as c:
            c.attr(label=label, style="rounded")
            for i, node in enumerate(nodes):
                node_id = _emit(c, node, ids)
                dot.edge(root, node_id, label=f"{label[:-1]}[{i}]")

    return dot


def write_and_render(
    program: ProgramNode, out_path: str, fmt: Optional[str] = "svg"
) -> str:
    """Write and render the AST graph to the given path (without extension).

    Example: write_and_render(program, 'out/ast', fmt='png') will create
    out/ast.png (requires Graphviz). Returns the rendered file's path."""
    dot = render_ast_dot(program)
    dot.format = fmt or "svg"
    # Note: render will append extension automatically
    return dot.render(out_path, cleanup=True)
