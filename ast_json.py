"""Convert AST nodes into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node. It encodes the node type
and its key fields; source positions are included when the parser set them.
`dump_ast(node, path)` writes that structure to a file.
"""

import json
from typing import Any, Dict, Optional
from ast_nodes import *


def _position(node: ASTNode) -> Dict[str, Any]:
    if node.line:
        return {"line": node.line, "column": node.column}
    return {}


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    t = node.type
    data: Dict[str, Any]
    # expressions
    if t == NodeType.LITERAL and isinstance(node, LiteralNode):
        data = {"node_type": "Literal", "value": node.value}
    elif t == NodeType.IDENTIFIER and isinstance(node, IdentifierNode):
        data = {"node_type": "Identifier", "name": node.name}
    elif t == NodeType.BINARY_OP and isinstance(node, BinaryOpNode):
        data = {
            "node_type": "BinaryOp",
            "operator": node.operator,
            "left": ast_to_json(node.left),
            "right": ast_to_json(node.right),
        }
    elif t == NodeType.UNARY_OP and isinstance(node, UnaryOpNode):
        data = {
            "node_type": "UnaryOp",
            "operator": node.operator,
            "operand": ast_to_json(node.operand),
        }
    # display parts
    elif t == NodeType.CONCAT_MARKER:
        data = {"node_type": "Concat"}
    elif t == NodeType.NEWLINE_MARKER:
        data = {"node_type": "Newline"}
    elif t == NodeType.ESCAPE and isinstance(node, EscapeNode):
        data = {"node_type": "Escape", "char": node.char}
    # statements and higher-level nodes
    elif t == NodeType.DISPLAY_STMT and isinstance(node, DisplayStatementNode):
        data = {"node_type": "Display", "parts": [ast_to_json(p) for p in node.parts]}
    elif t == NodeType.SCAN_STMT and isinstance(node, ScanStatementNode):
        data = {"node_type": "Scan", "variable_names": list(node.variable_names)}
    elif t == NodeType.REASSIGNMENT and isinstance(node, ReassignmentNode):
        data = {
            "node_type": "Reassignment",
            "name": node.name,
            "value": ast_to_json(node.value),
        }
    elif t == NodeType.ASSIGNMENT and isinstance(node, AssignmentNode):
        data = {
            "node_type": "Assignment",
            "name": node.name,
            "expression": ast_to_json(node.expression),
        }
    elif t == NodeType.ELSE_IF_BLOCK and isinstance(node, ElseIfBlockNode):
        data = {
            "node_type": "ElseIf",
            "condition": ast_to_json(node.condition),
            "statements": [ast_to_json(s) for s in node.statements],
        }
    elif t == NodeType.CONDITIONAL and isinstance(node, ConditionalNode):
        data = {
            "node_type": "Conditional",
            "condition": ast_to_json(node.condition),
            "if_block": [ast_to_json(s) for s in node.if_block],
            "else_if_blocks": [ast_to_json(b) for b in node.else_if_blocks],
            "else_block": (
                [ast_to_json(s) for s in node.else_block]
                if node.else_block is not None
                else None
            ),
        }
    elif t == NodeType.VAR_DECL and isinstance(node, VariableDeclarationNode):
        data = {
            "node_type": "VarDecl",
            "var_name": node.var_name,
            "var_type": str(node.var_type),
            "init_value": (
                ast_to_json(node.init_value) if node.init_value is not None else None
            ),
        }
    elif t == NodeType.PROGRAM and isinstance(node, ProgramNode):
        data = {
            "node_type": "Program",
            "declarations": [ast_to_json(d) for d in node.declarations],
            "statements": [ast_to_json(s) for s in node.statements],
        }
    else:
        raise TypeError(f"Cannot serialize node of type {t}")

    data.update(_position(node))
    return data


def dump_ast(node: ASTNode, path: str) -> None:
    """Write the JSON form of `node` to `path`."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(ast_to_json(node), f, indent=2)
        f.write("\n")
