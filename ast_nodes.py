"""AST node definitions for the CODE language.

This module defines the concrete AST node dataclasses produced by the parser
and consumed by the semantic analyzer, evaluator and printers. Each node is
a dataclass that carries the relevant information (an operator, child nodes,
names, types). The `NodeType` enum identifies node kinds.

Conventions:
- All AST node dataclasses inherit from `ASTNode` which records the node
    kind (`NodeType`) and optional source `line`/`column` information.
- A program is split into its declaration block and its statements; both are
    ordered lists.
- Display statements hold a list of parts. A part is either an expression
    node (identifier, literal, operation) or one of the marker nodes
    (`ConcatMarkerNode`, `NewlineMarkerNode`, `EscapeNode`).
- Declaration initializers are expression nodes, or an `AssignmentNode` when
    the initializer is itself a chain such as `INT a = b = 5`.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Union, List
from symbols import SymbolType


class NodeType(Enum):
    LITERAL = auto()
    IDENTIFIER = auto()
    BINARY_OP = auto()
    UNARY_OP = auto()
    CONCAT_MARKER = auto()
    NEWLINE_MARKER = auto()
    ESCAPE = auto()
    DISPLAY_STMT = auto()
    SCAN_STMT = auto()
    REASSIGNMENT = auto()
    ASSIGNMENT = auto()
    ELSE_IF_BLOCK = auto()
    CONDITIONAL = auto()
    VAR_DECL = auto()
    PROGRAM = auto()

    def __str__(self) -> str:
        return self.name


# Base AST Node
@dataclass
class ASTNode:
    type: NodeType
    line: int = 0
    column: int = 0


# Expression Nodes
@dataclass
class LiteralNode(ASTNode):
    type: NodeType = NodeType.LITERAL
    value: Union[int, float, str, bool] = 0


@dataclass
class IdentifierNode(ASTNode):
    type: NodeType = NodeType.IDENTIFIER
    name: str = ""


@dataclass
class BinaryOpNode(ASTNode):
    type: NodeType = NodeType.BINARY_OP
    left: ASTNode = field(default_factory=lambda: LiteralNode())
    operator: str = ""
    right: ASTNode = field(default_factory=lambda: LiteralNode())


@dataclass
class UnaryOpNode(ASTNode):
    type: NodeType = NodeType.UNARY_OP
    operator: str = ""
    operand: ASTNode = field(default_factory=lambda: LiteralNode())


# Display parts
@dataclass
class ConcatMarkerNode(ASTNode):
    type: NodeType = NodeType.CONCAT_MARKER


@dataclass
class NewlineMarkerNode(ASTNode):
    type: NodeType = NodeType.NEWLINE_MARKER


@dataclass
class EscapeNode(ASTNode):
    type: NodeType = NodeType.ESCAPE
    char: str = ""


# Statement Nodes
@dataclass
class DisplayStatementNode(ASTNode):
    type: NodeType = NodeType.DISPLAY_STMT
    parts: List[ASTNode] = field(default_factory=list)


@dataclass
class ScanStatementNode(ASTNode):
    type: NodeType = NodeType.SCAN_STMT
    variable_names: List[str] = field(default_factory=list)


@dataclass
class ReassignmentNode(ASTNode):
    type: NodeType = NodeType.REASSIGNMENT
    name: str = ""
    # Either an expression or a nested ReassignmentNode for `a = b = 5`
    value: ASTNode = field(default_factory=lambda: LiteralNode())


@dataclass
class AssignmentNode(ASTNode):
    type: NodeType = NodeType.ASSIGNMENT
    name: str = ""
    expression: ASTNode = field(default_factory=lambda: LiteralNode())


@dataclass
class ElseIfBlockNode(ASTNode):
    type: NodeType = NodeType.ELSE_IF_BLOCK
    condition: ASTNode = field(default_factory=lambda: LiteralNode(value=False))
    statements: List[ASTNode] = field(default_factory=list)


@dataclass
class ConditionalNode(ASTNode):
    type: NodeType = NodeType.CONDITIONAL
    condition: ASTNode = field(default_factory=lambda: LiteralNode(value=False))
    if_block: List[ASTNode] = field(default_factory=list)
    else_if_blocks: List[ElseIfBlockNode] = field(default_factory=list)
    else_block: Optional[List[ASTNode]] = None


# Declaration Nodes
@dataclass
class VariableDeclarationNode(ASTNode):
    type: NodeType = NodeType.VAR_DECL
    var_name: str = ""
    var_type: SymbolType = SymbolType.INT
    init_value: Optional[ASTNode] = None


# Program Node
@dataclass
class ProgramNode(ASTNode):
    type: NodeType = NodeType.PROGRAM
    declarations: List[VariableDeclarationNode] = field(default_factory=list)
    statements: List[ASTNode] = field(default_factory=list)
