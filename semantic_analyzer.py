"""Semantic analysis for the CODE language.

This module provides a `SemanticAnalyzer` class that walks the program
produced by the parser, builds a static symbol table and checks the typing
rules of declarations and statements.

Responsibilities:
- Reject duplicate declarations and references to undeclared variables.
- Coerce literal initializers to the declared type (`"TRUE"` -> True for
  BOOL, digit strings -> numbers for INT/FLOAT) and narrow initializers that
  name another variable to that variable's known value.
- Resolve assignment chains (`INT a = b = 5`, `a = b = c = 5`), declaring
  any target that was not declared before.
- Validate operand types, `DISPLAY` concatenation layout, `SCAN` targets and
  `IF` conditions.

Unlike the parser, the analyzer does not stop at the first problem: every
finding is appended to a list of diagnostic strings and the program is only
accepted when that list is empty. Analysis runs on a deep copy of the
program, so the parser's tree is left untouched and the rewritten copy is
returned in `AnalysisResult.program`.

`infer_expression_type` raises `AnalyzerTypeError` for operand types it
cannot combine. The analyzer only calls it on expressions whose operands
already passed `analyze_expression`, so a raise there is an internal error
rather than a user mistake.
"""

from __future__ import annotations
import copy
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional
from ast_nodes import *
from errors import AnalyzerTypeError
from symbols import (
    NUMERIC_TYPES,
    TEXT_TYPES,
    SymbolTable,
    SymbolType,
    type_of_value,
)

logger = logging.getLogger(__name__)


ARITHMETIC_OPERATORS = {"+", "-", "*", "/", "%", "^"}
ORDERING_OPERATORS = {"<", ">", "<=", ">="}
EQUALITY_OPERATORS = {"==", "<>", "!="}
LOGICAL_OPERATORS = {"AND", "OR", "&&", "||"}

# Characters that may only be written literally through a `[x]` escape.
RESERVED_SYMBOLS = set("=,'#$&[]:+-*/%<>!()")

_INT_TEXT = re.compile(r"[+-]?\d+")
_FLOAT_TEXT = re.compile(r"[+-]?\d+(\.\d*)?")


@dataclass
class AnalysisResult:
    accepted: bool
    diagnostics: List[str] = field(default_factory=list)
    program: Optional[ProgramNode] = None


class SemanticAnalyzer:
    def __init__(self):
        self.symbol_table = SymbolTable()
        self.diagnostics: List[str] = []
        self.program: Optional[ProgramNode] = None
        self.current_declaration: Optional[VariableDeclarationNode] = None

    def error(self, message: str) -> None:
        logger.debug("Diagnostic: %s", message)
        self.diagnostics.append(message)

    def synthesize_declaration(self, decl: VariableDeclarationNode) -> None:
        """Add an implicit declaration ahead of the one being analyzed."""
        declarations = self.program.declarations
        if self.current_declaration is not None:
            # Later initializers may read the new variable.
            index = next(
                i for i, d in enumerate(declarations) if d is self.current_declaration
            )
            declarations.insert(index, decl)
        else:
            declarations.append(decl)
        logger.debug("Implicit declaration of '%s' as %s", decl.var_name, decl.var_type)

    def analyze(self, program: ProgramNode) -> AnalysisResult:
        """Analyze a program and return the verdict with the rewritten copy."""
        self.symbol_table = SymbolTable()
        self.diagnostics = []
        self.program = copy.deepcopy(program)

        # Declarations synthesized along the way are already in the symbol
        # table, so only the parsed ones are visited.
        for decl in list(self.program.declarations):
            self.current_declaration = decl
            self.analyze_variable_declaration(decl)
        self.current_declaration = None

        for stmt in self.program.statements:
            self.analyze_statement(stmt)

        return AnalysisResult(
            accepted=not self.diagnostics,
            diagnostics=list(self.diagnostics),
            program=self.program,
        )

    # Declarations

    def analyze_variable_declaration(self, decl: VariableDeclarationNode) -> None:
        name = decl.var_name
        var_type = decl.var_type
        init = decl.init_value

        if self.symbol_table.exists(name):
            self.error(f"Variable '{name}' is already declared.")
            return

        if init is None:
            self.symbol_table.declare(name, var_type)
            return

        if isinstance(init, AssignmentNode):
            init = self.analyze_assignment(init)
            if init is None:
                self.symbol_table.declare(name, var_type, initialized=True)
                return

        match init:
            case IdentifierNode(name=ref):
                symbol = self.symbol_table.get(ref)
                if symbol is None:
                    self.error(f"Undeclared variable '{ref}' used in initialization of '{name}'.")
                    self.symbol_table.declare(name, var_type, initialized=True)
                    return
                if not symbol.initialized:
                    self.error(f"Uninitialized variable '{ref}' used in initialization of '{name}'.")
                    self.symbol_table.declare(name, var_type, initialized=True)
                    return
                if symbol.value is not None:
                    init = copy.deepcopy(symbol.value)
            case LiteralNode():
                pass
            case _:
                if not self.analyze_expression(init, require_initialized=True):
                    self.symbol_table.declare(name, var_type, initialized=True)
                    return

        if isinstance(init, LiteralNode):
            init = self.coerce_literal(var_type, init)
        decl.init_value = init

        if not self.check_type_compatibility(var_type, init):
            self.error(
                f"Type mismatch in initialization of '{name}': "
                f"cannot assign {self.describe_type(init)} to {var_type}."
            )

        self.symbol_table.declare(name, var_type, init, initialized=True)

    @staticmethod
    def coerce_literal(var_type: SymbolType, literal: LiteralNode) -> LiteralNode:
        """Convert a literal initializer to the declared type's native value."""
        value = literal.value
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)

        match var_type:
            case SymbolType.FLOAT if is_number:
                coerced = float(value)
            case SymbolType.FLOAT if isinstance(value, str) and _FLOAT_TEXT.fullmatch(value.strip()):
                coerced = float(value)
            case SymbolType.INT if isinstance(value, str) and _INT_TEXT.fullmatch(value.strip()):
                coerced = int(value)
            case SymbolType.BOOL if isinstance(value, str) and value.upper() in ("TRUE", "FALSE"):
                coerced = value.upper() == "TRUE"
            case _:
                return literal

        return LiteralNode(value=coerced, line=literal.line, column=literal.column)

    # Statements

    def analyze_statement(self, stmt: ASTNode) -> None:
        match stmt:
            case DisplayStatementNode():
                self.analyze_display_statement(stmt)
            case ScanStatementNode():
                self.analyze_scan_statement(stmt)
            case ReassignmentNode():
                self.analyze_reassignment(stmt)
            case AssignmentNode():
                self.analyze_assignment(stmt)
            case ConditionalNode():
                self.analyze_conditional(stmt)
            case _:
                self.error(f"Unsupported statement: {stmt.type}")

    def analyze_display_statement(self, node: DisplayStatementNode) -> None:
        # Parts must alternate: part & part & part ...
        previous = None
        for part in node.parts:
            if isinstance(part, ConcatMarkerNode):
                if previous is None:
                    self.error("Leading concatenation operator '&' in display statement.")
                elif previous == "concat":
                    self.error("Consecutive concatenation operators '&' in display statement.")
                previous = "concat"
                continue

            if previous == "part":
                self.error("Missing concatenation operator '&' between display parts.")

            match part:
                case EscapeNode(char=char):
                    if char not in RESERVED_SYMBOLS:
                        self.error(f"Invalid escape sequence: [{char}]")
                case IdentifierNode(name=name):
                    if not self.symbol_table.exists(name):
                        self.error(f"Undeclared variable '{name}' used in display statement.")
                case NewlineMarkerNode():
                    pass
                case _:
                    self.analyze_expression(part)
            previous = "part"

        if previous == "concat":
            self.error("Trailing concatenation operator '&' in display statement.")

    def analyze_scan_statement(self, node: ScanStatementNode) -> None:
        for name in node.variable_names:
            symbol = self.symbol_table.get(name)
            if symbol is None:
                self.error(f"Variable '{name}' not declared.")
                continue
            # The value only becomes known at run time.
            symbol.initialized = True
            symbol.value = None

    def analyze_reassignment(self, node: ReassignmentNode) -> Optional[ASTNode]:
        """Check `name = value` (possibly chained) and return the final value."""
        value = node.value
        match value:
            case ReassignmentNode():
                resolved = self.analyze_reassignment(value)
            case AssignmentNode():
                resolved = self.analyze_assignment(value)
            case _:
                resolved = value if self.analyze_expression(value) else None

        if resolved is None:
            return None

        symbol = self.symbol_table.get(node.name)
        if symbol is None:
            var_type = self.infer_expression_type(resolved)
            self.synthesize_declaration(
                VariableDeclarationNode(
                    var_name=node.name, var_type=var_type, line=node.line, column=node.column
                )
            )
            self.symbol_table.declare(node.name, var_type, resolved, initialized=True)
            return resolved

        if not self.check_type_compatibility(symbol.type, resolved):
            self.error(
                f"Type mismatch in assignment to '{node.name}': "
                f"cannot assign {self.describe_type(resolved)} to {symbol.type}."
            )
        else:
            symbol.value = resolved
            symbol.initialized = True
        return resolved

    def analyze_assignment(self, node: AssignmentNode) -> Optional[ASTNode]:
        """Resolve a declaration-time chain and return the final value.

        Unlike a reassignment statement there is no statement left to run
        later, so the target's declaration itself receives the value.
        """
        expression = node.expression
        if isinstance(expression, AssignmentNode):
            resolved = self.analyze_assignment(expression)
        elif self.analyze_expression(expression, require_initialized=True):
            resolved = expression
        else:
            resolved = None

        if resolved is None:
            return None

        symbol = self.symbol_table.get(node.name)
        if symbol is None:
            var_type = self.infer_expression_type(resolved)
            init = resolved
            if isinstance(init, LiteralNode):
                init = self.coerce_literal(var_type, init)
            self.synthesize_declaration(
                VariableDeclarationNode(
                    var_name=node.name,
                    var_type=var_type,
                    init_value=copy.deepcopy(init),
                    line=node.line,
                    column=node.column,
                )
            )
            self.symbol_table.declare(node.name, var_type, init, initialized=True)
            return resolved

        if not self.check_type_compatibility(symbol.type, resolved):
            self.error(
                f"Type mismatch in assignment to '{node.name}': "
                f"cannot assign {self.describe_type(resolved)} to {symbol.type}."
            )
            return resolved

        init = resolved
        if isinstance(init, LiteralNode):
            init = self.coerce_literal(symbol.type, init)
        symbol.value = init
        symbol.initialized = True
        for decl in self.program.declarations:
            if decl.var_name == node.name:
                decl.init_value = copy.deepcopy(init)
        return resolved

    def analyze_conditional(self, node: ConditionalNode) -> None:
        self.check_condition(node.condition)
        for stmt in node.if_block:
            self.analyze_statement(stmt)

        for block in node.else_if_blocks:
            self.check_condition(block.condition)
            for stmt in block.statements:
                self.analyze_statement(stmt)

        if node.else_block is not None:
            for stmt in node.else_block:
                self.analyze_statement(stmt)

    def check_condition(self, condition: ASTNode) -> None:
        if not self.analyze_expression(condition):
            return
        if not self.check_type_compatibility(SymbolType.BOOL, condition):
            self.error(f"Condition must be BOOL, got {self.describe_type(condition)}.")

    # Expressions

    def analyze_expression(self, node: ASTNode, require_initialized: bool = False) -> bool:
        """Record diagnostics for `node`; return True when it added none."""
        before = len(self.diagnostics)

        match node:
            case LiteralNode():
                pass

            case IdentifierNode(name=name):
                symbol = self.symbol_table.get(name)
                if symbol is None:
                    self.error(f"Undeclared variable '{name}' used in expression.")
                elif require_initialized and not symbol.initialized:
                    self.error(f"Uninitialized variable '{name}' used in expression.")

            case UnaryOpNode(operator=op, operand=operand):
                if self.analyze_expression(operand, require_initialized):
                    operand_type = self.infer_expression_type(operand)
                    if op == "NOT" and operand_type != SymbolType.BOOL:
                        self.error(f"Invalid operand for unary operation 'NOT': {operand_type}")
                    elif op in ("+", "-") and operand_type not in NUMERIC_TYPES:
                        self.error(f"Invalid operand for unary operation '{op}': {operand_type}")

            case BinaryOpNode(left=left, operator=op, right=right):
                left_ok = self.analyze_expression(left, require_initialized)
                right_ok = self.analyze_expression(right, require_initialized)
                if left_ok and right_ok:
                    left_type = self.infer_expression_type(left)
                    right_type = self.infer_expression_type(right)
                    if not self.operands_valid(op, left_type, right_type):
                        self.error(
                            f"Invalid operand for operation '{op}' for types: "
                            f"{left_type} and {right_type}"
                        )

            case _:
                self.error(f"Unsupported expression: {node.type}")

        return len(self.diagnostics) == before

    @staticmethod
    def operands_valid(op: str, left: SymbolType, right: SymbolType) -> bool:
        both_numeric = left in NUMERIC_TYPES and right in NUMERIC_TYPES

        if op in ARITHMETIC_OPERATORS or op in ORDERING_OPERATORS:
            return both_numeric
        if op in EQUALITY_OPERATORS:
            return both_numeric or left == right or (left in TEXT_TYPES and right in TEXT_TYPES)
        if op in LOGICAL_OPERATORS:
            return left == SymbolType.BOOL and right == SymbolType.BOOL
        return False

    @staticmethod
    def combine_types(left: SymbolType, right: SymbolType) -> SymbolType:
        """Result type of an arithmetic operation on two operand types."""
        if left == SymbolType.BOOL and right == SymbolType.BOOL:
            return SymbolType.BOOL
        if {left, right} == {SymbolType.BOOL, SymbolType.INT}:
            return SymbolType.BOOL
        if left == SymbolType.INT and right == SymbolType.INT:
            return SymbolType.INT
        if left in NUMERIC_TYPES and right in NUMERIC_TYPES:
            return SymbolType.FLOAT
        if SymbolType.STRING in (left, right):
            return SymbolType.STRING
        raise AnalyzerTypeError(
            f"Unsupported type combination in binary operation: {left} and {right}"
        )

    def infer_expression_type(self, node: ASTNode) -> SymbolType:
        """Compute the type of an expression bottom-up."""
        match node:
            case LiteralNode(value=value):
                return type_of_value(value)
            case IdentifierNode(name=name):
                symbol = self.symbol_table.get(name)
                if symbol is None:
                    raise AnalyzerTypeError(f"Undefined variable '{name}'")
                return symbol.type
            case UnaryOpNode(operator="NOT"):
                return SymbolType.BOOL
            case UnaryOpNode(operand=operand):
                return self.infer_expression_type(operand)
            case BinaryOpNode(left=left, operator=op, right=right):
                left_type = self.infer_expression_type(left)
                right_type = self.infer_expression_type(right)
                if op in ORDERING_OPERATORS | EQUALITY_OPERATORS | LOGICAL_OPERATORS:
                    return SymbolType.BOOL
                return self.combine_types(left_type, right_type)
            case AssignmentNode(expression=expression):
                return self.infer_expression_type(expression)
            case ReassignmentNode(value=value):
                return self.infer_expression_type(value)
            case _:
                raise AnalyzerTypeError(f"Unsupported expression type: {node.type}")

    def describe_type(self, node: ASTNode) -> str:
        try:
            return str(self.infer_expression_type(node))
        except AnalyzerTypeError:
            return str(node.type)

    def check_type_compatibility(self, declared: SymbolType, value: ASTNode) -> bool:
        """Return True if `value` may be stored in a variable of type `declared`."""
        match value:
            case LiteralNode(value=v):
                is_number = isinstance(v, (int, float)) and not isinstance(v, bool)
                match declared:
                    case SymbolType.INT:
                        return isinstance(v, int) and not isinstance(v, bool)
                    case SymbolType.FLOAT:
                        return is_number
                    case SymbolType.STRING:
                        return isinstance(v, str)
                    case SymbolType.CHAR:
                        return isinstance(v, str) and len(v) == 1
                    case SymbolType.BOOL:
                        return isinstance(v, bool)

            case IdentifierNode(name=name):
                symbol = self.symbol_table.get(name)
                if symbol is None:
                    return False
                return (
                    symbol.type == declared
                    or (declared == SymbolType.FLOAT and symbol.type == SymbolType.INT)
                    or (declared == SymbolType.STRING and symbol.type == SymbolType.CHAR)
                )

            case BinaryOpNode(operator=op) | UnaryOpNode(operator=op):
                arithmetic = op in ARITHMETIC_OPERATORS
                if declared in NUMERIC_TYPES:
                    return arithmetic
                if declared == SymbolType.BOOL:
                    return not arithmetic
                return False

        return False
