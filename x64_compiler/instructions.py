"""
Abstract instruction vocabulary for the x86-64 C Compiler.

The code generator emits a flat list of these; the printer turns each
one into a line of GNU as text. Nothing here names a real CPU register:
Register is the fixed pool of value slots the generator allocates from,
and printer.py decides which architectural register backs each slot.

Register allocation discipline:
  - ACCUMULATOR:   value of the subtree evaluated last
  - SCRATCH:       left operand of a pending binary op, popped back
                   from the machine stack after the right side is done
  - DIVIDEND_HIGH: upper half of the dividend for IDIV
  - DIVISOR:       divisor for IDIV
"""

from __future__ import annotations
import enum
from dataclasses import dataclass
from typing import Union


class Register(enum.Enum):
    ACCUMULATOR = "accumulator"
    SCRATCH = "scratch"
    DIVIDEND_HIGH = "dividend_high"
    DIVISOR = "divisor"


@dataclass(frozen=True)
class Immediate:
    value: int

@dataclass(frozen=True)
class Reg:
    register: Register


Param = Union[Immediate, Reg]

ACC = Reg(Register.ACCUMULATOR)
SCRATCH = Reg(Register.SCRATCH)
DIVISOR = Reg(Register.DIVISOR)


class Op(enum.Enum):
    # Zero operands
    RET = "ret"
    SIGN_EXTEND = "sign_extend"     # ACCUMULATOR -> DIVIDEND_HIGH:ACCUMULATOR

    # One operand
    PUSH = "push"
    POP = "pop"
    NEG = "neg"
    NOT = "not"
    SETE = "sete"
    IDIV = "idiv"

    # Two operands (src, dst)
    MOV = "mov"
    CMP = "cmp"
    ADD = "add"
    SUB = "sub"
    IMUL = "imul"


NULLARY_OPS = frozenset({Op.RET, Op.SIGN_EXTEND})
UNARY_OPS = frozenset({Op.PUSH, Op.POP, Op.NEG, Op.NOT, Op.SETE, Op.IDIV})
BINARY_OPS = frozenset({Op.MOV, Op.CMP, Op.ADD, Op.SUB, Op.IMUL})


class DirectiveKind(enum.Enum):
    TEXT = "text"       # switch to the code section
    GLOBAL = "globl"    # export a symbol


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    argument: str = ""

@dataclass(frozen=True)
class Label:
    name: str


@dataclass(frozen=True)
class Instruction0:
    "An instruction of arity 0."
    op: Op

    def __post_init__(self):
        assert self.op in NULLARY_OPS, f"{self.op} takes operands"

@dataclass(frozen=True)
class Instruction1:
    "An instruction of arity 1."
    op: Op
    operand: Param

    def __post_init__(self):
        assert self.op in UNARY_OPS, f"{self.op} does not take one operand"

@dataclass(frozen=True)
class Instruction2:
    "An instruction of arity 2, AT&T order: src then dst."
    op: Op
    src: Param
    dst: Param

    def __post_init__(self):
        assert self.op in BINARY_OPS, f"{self.op} does not take two operands"


Instruction = Union[Directive, Label, Instruction0, Instruction1, Instruction2]
