"""Pretty-printer for the AST.

Provides `PrettyPrinter.print_ast(node, indent, prefix)` which renders an
AST into a readable multi-line tree, and `PrettyPrinter.print_surface(node)`
which renders a node back into CODE-like source text. Both are meant for
debugging, tests and the `--print-ast` flag rather than for round-tripping
programs.

Examples:
    PrettyPrinter.print_ast(program_node)
    PrettyPrinter.print_surface(program_node)
"""

from __future__ import annotations
from typing import List
from ast_nodes import *


def _literal(value) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


class PrettyPrinter:
    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string."""
        lines = []
        indent_str = " " * indent

        if not isinstance(node, ASTNode):
            lines.append(f"{indent_str}{prefix}{node}")
            return "\n".join(lines)

        match node:
            case LiteralNode(value=v):
                lines.append(f"{indent_str}{prefix}Literal({_literal(v)})")

            case IdentifierNode(name=n):
                lines.append(f"{indent_str}{prefix}Identifier({n})")

            case BinaryOpNode(left=left, operator=op, right=right):
                lines.append(f"{indent_str}{prefix}BinaryOp({op})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case UnaryOpNode(operator=op, operand=operand):
                lines.append(f"{indent_str}{prefix}UnaryOp({op})")
                lines.append(PrettyPrinter.print_ast(operand, indent + 2))

            case ConcatMarkerNode():
                lines.append(f"{indent_str}{prefix}Concat")

            case NewlineMarkerNode():
                lines.append(f"{indent_str}{prefix}Newline")

            case EscapeNode(char=c):
                lines.append(f"{indent_str}{prefix}Escape([{c}])")

            case DisplayStatementNode(parts=parts):
                lines.append(f"{indent_str}{prefix}Display")
                for i, part in enumerate(parts):
                    lines.append(PrettyPrinter.print_ast(part, indent + 4, f"part[{i}]: "))

            case ScanStatementNode(variable_names=names):
                lines.append(f"{indent_str}{prefix}Scan({', '.join(names)})")

            case ReassignmentNode(name=n, value=value):
                lines.append(f"{indent_str}{prefix}Reassignment({n})")
                lines.append(PrettyPrinter.print_ast(value, indent + 2, "value: "))

            case AssignmentNode(name=n, expression=expr):
                lines.append(f"{indent_str}{prefix}Assignment({n})")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2, "expr: "))

            case ConditionalNode(
                condition=cond, if_block=if_b, else_if_blocks=elifs, else_block=else_b
            ):
                lines.append(f"{indent_str}{prefix}Conditional")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(f"{indent_str}    then:")
                for i, stmt in enumerate(if_b):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 8, f"stmt[{i}]: "))
                for j, block in enumerate(elifs):
                    lines.append(PrettyPrinter.print_ast(block, indent + 4, f"else_if[{j}]: "))
                if else_b is not None:
                    lines.append(f"{indent_str}    else:")
                    for i, stmt in enumerate(else_b):
                        lines.append(PrettyPrinter.print_ast(stmt, indent + 8, f"stmt[{i}]: "))

            case ElseIfBlockNode(condition=cond, statements=stmts):
                lines.append(f"{indent_str}{prefix}ElseIf")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                for i, stmt in enumerate(stmts):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"stmt[{i}]: "))

            case VariableDeclarationNode(var_name=vname, var_type=vtype, init_value=init):
                init_str = " = ..." if init is not None else ""
                lines.append(f"{indent_str}{prefix}VarDecl({vname}: {vtype}{init_str})")
                if init is not None:
                    lines.append(PrettyPrinter.print_ast(init, indent + 2, "init: "))

            case ProgramNode(declarations=decls, statements=stmts):
                lines.append(f"{indent_str}{prefix}Program")
                for i, decl in enumerate(decls):
                    lines.append(PrettyPrinter.print_ast(decl, indent + 4, f"decl[{i}]: "))
                for i, stmt in enumerate(stmts):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"stmt[{i}]: "))

            case _:
                lines.append(f"{indent_str}{prefix}Unknown node type: {type(node)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return a CODE-like source rendering of an AST node.

        Expressions and simple statements come back as one line (e.g.
        `DISPLAY: x & $ & "y"`). Conditionals and programs span several lines
        with their `BEGIN`/`END` markers; nested operations are parenthesized.
        """
        if node is None:
            return ""

        def _p(n: ASTNode) -> str:
            if isinstance(n, BinaryOpNode):
                return f"({PrettyPrinter.print_surface(n)})"
            return PrettyPrinter.print_surface(n) if isinstance(n, ASTNode) else str(n)

        def _block(stmts: List[ASTNode]) -> List[str]:
            body = []
            for stmt in stmts:
                body.extend("    " + line for line in PrettyPrinter.print_surface(stmt).split("\n"))
            return body

        match node:
            case LiteralNode(value=v):
                return _literal(v)
            case IdentifierNode(name=n):
                return n
            case BinaryOpNode(left=l, operator=op, right=r):
                return f"{_p(l)} {op} {_p(r)}"
            case UnaryOpNode(operator="NOT", operand=operand):
                return f"NOT {_p(operand)}"
            case UnaryOpNode(operator=op, operand=operand):
                return f"{op}{_p(operand)}"
            case ConcatMarkerNode():
                return "&"
            case NewlineMarkerNode():
                return "$"
            case EscapeNode(char=c):
                return f"[{c}]"
            case DisplayStatementNode(parts=parts):
                return "DISPLAY: " + " ".join(_p(p) for p in parts)
            case ScanStatementNode(variable_names=names):
                return "SCAN: " + ", ".join(names)
            case ReassignmentNode(name=n, value=value):
                return f"{n} = {PrettyPrinter.print_surface(value)}"
            case AssignmentNode(name=n, expression=expr):
                return f"{n} = {PrettyPrinter.print_surface(expr)}"
            case VariableDeclarationNode(var_type=vt, var_name=vn, init_value=init):
                if init is not None:
                    return f"{vt} {vn} = {PrettyPrinter.print_surface(init)}"
                return f"{vt} {vn}"
            case ConditionalNode(
                condition=cond, if_block=if_b, else_if_blocks=elifs, else_block=else_b
            ):
                lines = [f"IF ({PrettyPrinter.print_surface(cond)})", "BEGIN IF"]
                lines.extend(_block(if_b))
                lines.append("END IF")
                for block in elifs:
                    lines.append(f"ELSE IF ({PrettyPrinter.print_surface(block.condition)})")
                    lines.append("BEGIN IF")
                    lines.extend(_block(block.statements))
                    lines.append("END IF")
                if else_b is not None:
                    lines.extend(["ELSE", "BEGIN IF"])
                    lines.extend(_block(else_b))
                    lines.append("END IF")
                return "\n".join(lines)
            case ProgramNode(declarations=decls, statements=stmts):
                lines = ["BEGIN CODE"]
                lines.extend(_block(decls))
                lines.extend(_block(stmts))
                lines.append("END CODE")
                return "\n".join(lines)
            case _:
                return str(node)
