"""
x64cc: a tiny C compiler for x86-64
===================================
Compiles a single `int name() { return <expr>; }` function, where <expr>
is built from integer constants, + - * /, unary - ~ ! and parentheses,
into GNU as (AT&T) assembly for x86-64 Linux or macOS.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────────┐    ┌───────────┐
    │ C Source │───>│  Lexer   │───>│  Parser  │───>│   CodeGen    │───>│  Printer  │
    │ (.c)     │    │ (tokens) │    │  (AST)   │    │(instructions)│    │ (asm text)│
    └──────────┘    └──────────┘    └──────────┘    └──────────────┘    └───────────┘

    - lexer.py:        Regex token shapes tried in priority order
    - parser.py:       Recursive descent, one method per grammar rule
    - ast_nodes.py:    Frozen dataclass tree; precedence is structural
    - codegen.py:      Stack-machine tree walk over a fixed register pool
    - instructions.py: Architecture-neutral instruction vocabulary
    - printer.py:      AT&T rendering, the only place real registers are named
    - ast_printer.py:  AST back to C source
    - toolchain.py:    Write the .s file and link it with gcc
"""

__version__ = "0.1.0"

from typing import Callable, Optional

from .lexer import Lexer, LexerError, Token, TokenKind, TokenType, UnrecognizedToken, tokenize
from .ast_nodes import *
from .parser import Parser, ParseError, UnexpectedFactor, UnexpectedToken, parse
from .codegen import CodeGenerator, CodeGenError, UnsupportedOperator, generate
from .printer import TARGET_PROFILES, render, render_instruction
from .ast_printer import format_program
from .toolchain import ToolchainError, assemble, write_assembly


def compile_source(source: str, *, target: str = "linux",
                   trace: Optional[Callable[[str], None]] = None) -> str:
    """Compile C source code to x86-64 assembly text.

    Full pipeline: Lexer -> Parser -> AST -> CodeGenerator -> Printer.

    Args:
        source: C source code string.
        target: Key of TARGET_PROFILES ('linux' or 'darwin').
        trace: Optional callable receiving one debug line per pipeline event.

    Returns:
        Assembly text, newline-terminated.

    Raises:
        LexerError, ParseError or CodeGenError on the first problem found.
    """
    tokens = Lexer(source, trace=trace).tokenize()
    ast = Parser(tokens, trace=trace).parse()
    instructions = CodeGenerator(trace=trace).generate(ast)
    return render(instructions, target=target)
