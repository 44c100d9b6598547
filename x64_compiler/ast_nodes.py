"""
AST Node definitions for the x86-64 C Compiler.

Defines the Abstract Syntax Tree structure produced by the parser
and consumed by the code generator.

The expression grammar has three precedence tiers and the node types
mirror them, so precedence is settled by the shape of the tree:

    Expression = Term   | AdditiveOp(left: Expression, op: + -, right: Term)
    Term       = Factor | MultiplicativeOp(left: Term, op: * /, right: Factor)
    Factor     = Group(Expression) | UnaryOp(op: - ~ !, operand: Factor) | Constant

A tier that is just the tier below is not wrapped: a Term made of a
single Factor *is* that Factor node.

All nodes are frozen. Source positions are kept for diagnostics but do
not take part in equality, so two trees compare equal when their
structure and values match.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union


# ──────────────────────────────────────────────
# Base AST node
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    line: int = field(default=0, compare=False, repr=False, kw_only=True)
    col: int = field(default=0, compare=False, repr=False, kw_only=True)


# ──────────────────────────────────────────────
# Factors
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Constant(ASTNode):
    """Integer constant."""
    value: int

@dataclass(frozen=True)
class UnaryOp(ASTNode):
    """Prefix operator: '-' negate, '~' bitwise not, '!' logical not."""
    op: str
    operand: Factor

@dataclass(frozen=True)
class Group(ASTNode):
    """Parenthesized expression."""
    expr: Expression


# ──────────────────────────────────────────────
# Binary tiers
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class MultiplicativeOp(ASTNode):
    """Left-associative '*' or '/'."""
    left: Term
    op: str
    right: Factor

@dataclass(frozen=True)
class AdditiveOp(ASTNode):
    """Left-associative '+' or '-'."""
    left: Expression
    op: str
    right: Term


Factor = Union[Constant, UnaryOp, Group]
Term = Union[Factor, MultiplicativeOp]
Expression = Union[Term, AdditiveOp]

UNARY_OPERATORS = ("-", "~", "!")
MULTIPLICATIVE_OPERATORS = ("*", "/")
ADDITIVE_OPERATORS = ("+", "-")


# ──────────────────────────────────────────────
# Statements and top level
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Return(ASTNode):
    """return <expr>;"""
    expr: Expression

@dataclass(frozen=True)
class Function(ASTNode):
    """int <name>() { <body> }"""
    name: str
    body: Return

@dataclass(frozen=True)
class Program(ASTNode):
    """Root node: exactly one function."""
    function: Function
