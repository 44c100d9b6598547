"""
GNU as (AT&T syntax) printer for the x86-64 C Compiler.

Renders the abstract instruction list from codegen.py as assembly text,
one line per instruction:

        .text
        .globl  main
main:
        movl    $2, %eax
        ret

AT&T conventions: source operand first, '%' before registers,
'$' before immediates, a size suffix on the mnemonic.

This is the only module that knows real register names. Operand width
is chosen per operation: PUSH/POP must use the 64-bit register on
x86-64, SETE writes the low byte, and everything else is 32-bit.
"""

from __future__ import annotations
from typing import Dict, Iterable
from .instructions import (
    Directive, DirectiveKind, Immediate, Instruction, Instruction0,
    Instruction1, Instruction2, Label, Op, Param, Reg, Register,
)


# ──────────────────────────────────────────────
# Target profiles
# ──────────────────────────────────────────────

TARGET_PROFILES = {
    "linux": {
        "symbol_prefix": "",
        # Without this note, GNU ld warns that the stack is executable.
        "trailer": ['\t.section .note.GNU-stack,"",@progbits'],
        "description": "x86-64 Linux (ELF, System V)",
    },
    "darwin": {
        "symbol_prefix": "_",
        "trailer": [],
        "description": "x86-64 macOS (Mach-O)",
    },
}


# ──────────────────────────────────────────────
# Register and mnemonic tables
# ──────────────────────────────────────────────

_REGISTER_NAMES: Dict[Register, Dict[int, str]] = {
    Register.ACCUMULATOR:   {64: "rax", 32: "eax", 8: "al"},
    Register.SCRATCH:       {64: "rcx", 32: "ecx", 8: "cl"},
    Register.DIVIDEND_HIGH: {64: "rdx", 32: "edx", 8: "dl"},
    Register.DIVISOR:       {64: "rsi", 32: "esi", 8: "sil"},
}

_OPERAND_WIDTH = {
    Op.PUSH: 64,
    Op.POP: 64,
    Op.SETE: 8,
}

_MNEMONICS = {
    Op.RET: "ret",
    Op.SIGN_EXTEND: "cltd",
    Op.PUSH: "pushq",
    Op.POP: "popq",
    Op.NEG: "negl",
    Op.NOT: "notl",
    Op.SETE: "sete",
    Op.IDIV: "idivl",
    Op.MOV: "movl",
    Op.CMP: "cmpl",
    Op.ADD: "addl",
    Op.SUB: "subl",
    Op.IMUL: "imull",
}


def _profile(target: str) -> dict:
    if target not in TARGET_PROFILES:
        raise ValueError(f"Unknown target {target!r} (choose from {', '.join(TARGET_PROFILES)})")
    return TARGET_PROFILES[target]


def _operand(param: Param, width: int) -> str:
    if isinstance(param, Immediate):
        return f"${param.value}"
    if isinstance(param, Reg):
        return f"%{_REGISTER_NAMES[param.register][width]}"
    raise TypeError(f"Cannot render operand {param!r}")


def render_instruction(instr: Instruction, target: str = "linux") -> str:
    """Render one instruction as a line of assembly (no trailing newline)."""
    prefix = _profile(target)["symbol_prefix"]

    if isinstance(instr, Directive):
        if instr.kind is DirectiveKind.GLOBAL:
            return f"\t.{instr.kind.value}\t{prefix}{instr.argument}"
        return f"\t.{instr.kind.value}"
    if isinstance(instr, Label):
        return f"{prefix}{instr.name}:"

    if not isinstance(instr, (Instruction0, Instruction1, Instruction2)):
        raise TypeError(f"Cannot render instruction {instr!r}")

    width = _OPERAND_WIDTH.get(instr.op, 32)
    op = _MNEMONICS[instr.op]
    if isinstance(instr, Instruction0):
        return f"\t{op}"
    if isinstance(instr, Instruction1):
        return f"\t{op}\t{_operand(instr.operand, width)}"
    return f"\t{op}\t{_operand(instr.src, width)}, {_operand(instr.dst, width)}"


def render(instructions: Iterable[Instruction], target: str = "linux") -> str:
    """Render a full instruction list as assembly source text."""
    lines = [render_instruction(instr, target) for instr in instructions]
    lines.extend(_profile(target)["trailer"])
    return "\n".join(lines) + "\n"
