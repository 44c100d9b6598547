"""
Pretty-printer that turns an AST back into C source.

The output parses back into an equal tree: groups keep their
parentheses, no other parentheses are added, and constants come out
in decimal (the tree does not remember the literal's base).
"""

from __future__ import annotations
from .ast_nodes import *


def format_expression(expr: Expression) -> str:
    if isinstance(expr, Constant):
        return str(expr.value)
    if isinstance(expr, Group):
        return f"({format_expression(expr.expr)})"
    if isinstance(expr, UnaryOp):
        return f"{expr.op}{format_expression(expr.operand)}"
    if isinstance(expr, (AdditiveOp, MultiplicativeOp)):
        # Left spine is flattened so long chains do not recurse per operator
        spine = []
        while isinstance(expr, (AdditiveOp, MultiplicativeOp)):
            spine.append(expr)
            expr = expr.left
        parts = [format_expression(expr)]
        for node in reversed(spine):
            parts.append(f"{node.op} {format_expression(node.right)}")
        return " ".join(parts)
    raise TypeError(f"Cannot format {type(expr).__name__}")


def format_program(program: Program, indent: str = "    ") -> str:
    func = program.function
    return (
        f"int {func.name}() {{\n"
        f"{indent}return {format_expression(func.body.expr)};\n"
        f"}}\n"
    )
