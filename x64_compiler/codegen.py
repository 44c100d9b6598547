"""
x86-64 Code Generator for the x86-64 C Compiler.

Translates the AST into a flat list of abstract instructions
(see instructions.py). The printer turns them into GNU as text.

Evaluation strategy (stack machine over a fixed register pool):
  - Every expression leaves its value in the ACCUMULATOR.
  - A binary node evaluates its left side, pushes the accumulator,
    evaluates its right side, pops the left value into SCRATCH and
    combines SCRATCH with ACCUMULATOR.
  - Only two values are ever live at once (result so far and pending
    left operand); deeper nesting lives on the machine stack.

Division follows the x86-64 IDIV convention: the dividend is
DIVIDEND_HIGH:ACCUMULATOR (sign-extended), the divisor is any other
register, and the quotient lands back in the ACCUMULATOR.
"""

from __future__ import annotations
from typing import Callable, List, Optional
from .ast_nodes import *
from .instructions import (
    ACC, DIVISOR, SCRATCH, Directive, DirectiveKind, Immediate, Instruction,
    Instruction0, Instruction1, Instruction2, Label, Op,
)


class CodeGenError(Exception):
    def __init__(self, message: str, node: ASTNode):
        self.node = node
        super().__init__(f"Code generation error at L{node.line}:{node.col}: {message}")


class UnsupportedOperator(CodeGenError):
    def __init__(self, op: str, node: ASTNode):
        self.op = op
        super().__init__(f"Unsupported operator {op!r} in {type(node).__name__}", node)


# Instructions that combine SCRATCH (left) with ACCUMULATOR (right),
# leaving the result in ACCUMULATOR.
_BINARY_SEQUENCES = {
    "+": [
        Instruction2(Op.ADD, SCRATCH, ACC),
    ],
    "-": [
        # SUB computes dst - src, so subtract into SCRATCH and copy back.
        Instruction2(Op.SUB, ACC, SCRATCH),
        Instruction2(Op.MOV, SCRATCH, ACC),
    ],
    "*": [
        Instruction2(Op.IMUL, SCRATCH, ACC),
    ],
    "/": [
        Instruction2(Op.MOV, ACC, DIVISOR),
        Instruction2(Op.MOV, SCRATCH, ACC),
        Instruction0(Op.SIGN_EXTEND),
        Instruction1(Op.IDIV, DIVISOR),
    ],
}

_UNARY_SEQUENCES = {
    "-": [
        Instruction1(Op.NEG, ACC),
    ],
    "~": [
        Instruction1(Op.NOT, ACC),
    ],
    "!": [
        Instruction2(Op.CMP, Immediate(0), ACC),
        Instruction2(Op.MOV, Immediate(0), ACC),    # MOV leaves the flags alone
        Instruction1(Op.SETE, ACC),
    ],
}


class CodeGenerator:
    """Generates abstract x86-64 instructions from an AST."""

    def __init__(self, trace: Optional[Callable[[str], None]] = None):
        self.trace = trace
        self._code: List[Instruction] = []

    # ── Output helpers ────────────────────────

    def _emit(self, instr: Instruction):
        if self.trace:
            self.trace(f"emit: {instr}")
        self._code.append(instr)

    def _emit_all(self, instrs: List[Instruction]):
        for instr in instrs:
            self._emit(instr)

    # ── Main generation entry point ───────────

    def generate(self, program: Program) -> List[Instruction]:
        """Generate the instruction list for a Program AST."""
        self._code = []
        self._gen_function(program.function)
        return self._code

    def _gen_function(self, func: Function):
        if self.trace:
            self.trace(f"codegen: function {func.name}")
        self._emit(Directive(DirectiveKind.TEXT))
        self._emit(Directive(DirectiveKind.GLOBAL, func.name))
        self._emit(Label(func.name))
        self._gen_statement(func.body)

    def _gen_statement(self, stmt: ASTNode):
        if isinstance(stmt, Return):
            self._gen_expr(stmt.expr)
            self._emit(Instruction0(Op.RET))
        else:
            raise CodeGenError(f"Unhandled statement type {type(stmt).__name__}", stmt)

    # ── Expression generation ─────────────────
    # Convention: expression result is left in the ACCUMULATOR

    def _gen_expr(self, expr: Expression):
        if isinstance(expr, Constant):
            self._emit(Instruction2(Op.MOV, Immediate(expr.value), ACC))
        elif isinstance(expr, Group):
            self._gen_expr(expr.expr)
        elif isinstance(expr, UnaryOp):
            self._gen_unary_op(expr)
        elif isinstance(expr, (AdditiveOp, MultiplicativeOp)):
            self._gen_binary_op(expr)
        else:
            raise CodeGenError(f"Unhandled expression type {type(expr).__name__}", expr)

    def _gen_unary_op(self, op: UnaryOp):
        sequence = _UNARY_SEQUENCES.get(op.op)
        if sequence is None:
            raise UnsupportedOperator(op.op, op)
        self._gen_expr(op.operand)
        self._emit_all(sequence)

    def _gen_binary_op(self, op: AdditiveOp | MultiplicativeOp):
        # Walk the left spine iteratively: a flat chain like 1+1+...+1
        # nests only on the left and may be arbitrarily long.
        spine = _left_spine(op)
        self._gen_expr(spine[-1].left)
        for node in reversed(spine):
            self._emit(Instruction1(Op.PUSH, ACC))
            self._gen_expr(node.right)
            self._emit(Instruction1(Op.POP, SCRATCH))
            self._emit_all(_BINARY_SEQUENCES[node.op])


def _left_spine(op: AdditiveOp | MultiplicativeOp) -> List[AdditiveOp | MultiplicativeOp]:
    """Binary nodes from op down its left operands, outermost first."""
    spine = []
    node = op
    while isinstance(node, (AdditiveOp, MultiplicativeOp)):
        allowed = ADDITIVE_OPERATORS if isinstance(node, AdditiveOp) else MULTIPLICATIVE_OPERATORS
        if node.op not in allowed:
            raise UnsupportedOperator(node.op, node)
        spine.append(node)
        node = node.left
    return spine


def generate(program: Program, trace: Optional[Callable[[str], None]] = None) -> List[Instruction]:
    return CodeGenerator(trace=trace).generate(program)
