"""Tree-walking evaluator for analyzed CODE programs.

`Evaluator.run(program)` seeds a fresh runtime `SymbolTable` from the
program's declarations (initializer value or the type's zero value) and then
executes the statements in order from a work queue. A conditional runs the
statements of its chosen branch directly, and each of them finishes before
the statement after the conditional is taken from the queue.

`SCAN` is the only statement that waits on the outside world: it prompts with
`SCAN a, b:` and blocks on `Console.read_line()` until one line of input is
available.

The evaluator trusts the semantic analyzer: types are not re-checked when a
value is stored, but an INT stored into a FLOAT variable becomes a float.
Integer `/` and `%` truncate toward zero. Runtime failures (division by zero,
unknown variable, malformed input, unsupported node) raise `ExecutionError`
and abort the run; lines already written stay written.
"""

import logging
import math
from collections import deque
from typing import Any, Dict, List, Optional
from ast_nodes import *
from console import Console, StdConsole
from errors import ExecutionError
from symbols import Symbol, SymbolTable, SymbolType, coerce_value, zero_value

logger = logging.getLogger(__name__)


def format_value(value: Any) -> str:
    """Text a value contributes to a DISPLAY line."""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def truncated_quotient(lv: int, rv: int) -> int:
    """Integer quotient rounded toward zero, so -7 / 2 is -3."""
    q = abs(lv) // abs(rv)
    return q if (lv >= 0) == (rv >= 0) else -q


def parse_input(var_type: SymbolType, text: str) -> Any:
    """Convert one SCAN field to a value of the target variable's type."""
    match var_type:
        case SymbolType.INT:
            try:
                return int(text)
            except ValueError:
                raise ExecutionError(f"Invalid input for INT type: '{text}'") from None
        case SymbolType.FLOAT:
            try:
                return float(text)
            except ValueError:
                raise ExecutionError(f"Invalid input for FLOAT type: '{text}'") from None
        case SymbolType.BOOL:
            if text not in ("TRUE", "FALSE"):
                raise ExecutionError(f"Invalid input for BOOL type: '{text}'")
            return text == "TRUE"
        case SymbolType.CHAR:
            if len(text) != 1:
                raise ExecutionError(f"Invalid input for CHAR type: '{text}'")
            return text
        case _:
            return text


class Evaluator:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or StdConsole()
        self.symbols = SymbolTable()

    def run(self, program: ProgramNode) -> None:
        """Execute an analyzed program."""
        self.symbols = SymbolTable()
        for decl in program.declarations:
            self.declare(decl)

        queue = deque(program.statements)
        while queue:
            self.execute(queue.popleft())

    def declare(self, decl: VariableDeclarationNode) -> None:
        if self.symbols.exists(decl.var_name):
            raise ExecutionError(f"Variable '{decl.var_name}' is already declared")

        if decl.init_value is None:
            value = zero_value(decl.var_type)
        else:
            value = coerce_value(decl.var_type, self.evaluate(decl.init_value))
        self.symbols.declare(decl.var_name, decl.var_type, value, initialized=True)

    def lookup(self, name: str) -> Symbol:
        try:
            return self.symbols.lookup(name)
        except KeyError:
            raise ExecutionError(f"Variable '{name}' not found") from None

    def store(self, name: str, value: Any) -> None:
        symbol = self.lookup(name)
        symbol.value = coerce_value(symbol.type, value)

    # Statements

    def execute(self, stmt: ASTNode) -> None:
        match stmt:
            case DisplayStatementNode(parts=parts):
                self.console.write("".join(self.render_part(part) for part in parts))
            case ScanStatementNode(variable_names=names):
                self.scan(names)
            case ReassignmentNode() | AssignmentNode():
                self.assign_chain(stmt)
            case ConditionalNode():
                self.execute_conditional(stmt)
            case _:
                raise ExecutionError(f"Unsupported statement: {stmt.type}")

    def render_part(self, part: ASTNode) -> str:
        match part:
            case ConcatMarkerNode():
                return ""
            case NewlineMarkerNode():
                return "\n"
            case EscapeNode(char=char):
                return char
            case _:
                return format_value(self.evaluate(part))

    def scan(self, names: List[str]) -> None:
        try:
            line = self.console.read_line(f"SCAN {', '.join(names)}:")
        except EOFError:
            raise ExecutionError(
                f"Input ended while waiting for SCAN: {', '.join(names)}"
            ) from None
        logger.debug("SCAN %s <- %r", ", ".join(names), line)

        fields = [text.strip() for text in line.split(",")]
        if len(fields) != len(names):
            raise ExecutionError(
                f"SCAN expected {len(names)} value(s) but received {len(fields)}"
            )

        for name, text in zip(names, fields):
            self.store(name, parse_input(self.lookup(name).type, text))

    def assign_chain(self, node: ASTNode) -> Any:
        """Evaluate the innermost value once and store it in every target."""
        names = []
        current = node
        while isinstance(current, (ReassignmentNode, AssignmentNode)):
            names.append(current.name)
            current = current.value if isinstance(current, ReassignmentNode) else current.expression

        value = self.evaluate(current)
        for name in reversed(names):
            self.store(name, value)
        return value

    def execute_conditional(self, node: ConditionalNode) -> None:
        branch: List[ASTNode] = []
        if self.evaluate(node.condition):
            logger.debug("IF branch taken")
            branch = node.if_block
        else:
            for index, block in enumerate(node.else_if_blocks):
                if self.evaluate(block.condition):
                    logger.debug("ELSE IF branch %d taken", index)
                    branch = block.statements
                    break
            else:
                if node.else_block is not None:
                    logger.debug("ELSE branch taken")
                    branch = node.else_block

        for stmt in branch:
            self.execute(stmt)

    # Expressions

    def evaluate(self, node: ASTNode) -> Any:
        match node:
            case LiteralNode(value=v):
                return v
            case IdentifierNode(name=n):
                return self.lookup(n).value
            case BinaryOpNode(left=l, operator=op, right=r):
                lv = self.evaluate(l)
                rv = self.evaluate(r)
                try:
                    return self.apply_binary(op, lv, rv)
                except TypeError:
                    raise ExecutionError(
                        f"Cannot apply '{op}' to {format_value(lv)} and {format_value(rv)}"
                    ) from None
            case UnaryOpNode(operator=op, operand=operand):
                val = self.evaluate(operand)
                match op:
                    case "+":
                        return +val
                    case "-":
                        return -val
                    case "NOT":
                        return not val
                    case _:
                        raise ExecutionError(f"Unsupported operator: {op}")
            case ReassignmentNode() | AssignmentNode():
                return self.assign_chain(node)
            case _:
                raise ExecutionError(f"Unsupported node type: {node.type}")

    @staticmethod
    def apply_binary(op: str, lv: Any, rv: Any) -> Any:
        match op:
            case "+":
                return lv + rv
            case "-":
                return lv - rv
            case "*":
                return lv * rv
            case "/":
                if rv == 0:
                    raise ExecutionError("Division by zero")
                if isinstance(lv, int) and isinstance(rv, int):
                    return truncated_quotient(lv, rv)
                return lv / rv
            case "%":
                if rv == 0:
                    raise ExecutionError("Division by zero")
                if isinstance(lv, int) and isinstance(rv, int):
                    return lv - rv * truncated_quotient(lv, rv)
                return math.fmod(lv, rv)
            case "^":
                return lv ** rv
            case "==":
                return lv == rv
            case "!=" | "<>":
                return lv != rv
            case "<":
                return lv < rv
            case ">":
                return lv > rv
            case "<=":
                return lv <= rv
            case ">=":
                return lv >= rv
            # Both operands are already evaluated: no short-circuit.
            case "AND" | "&&":
                return bool(lv) and bool(rv)
            case "OR" | "||":
                return bool(lv) or bool(rv)
            case _:
                raise ExecutionError(f"Unsupported operator: {op}")


def interpret_program(
    program: ProgramNode, console: Optional[Console] = None
) -> Dict[str, Any]:
    """Run an analyzed program and return the final name -> value mapping."""
    evaluator = Evaluator(console)
    evaluator.run(program)
    return evaluator.symbols.values()
