#!/usr/bin/env python3
"""
x64cc: tiny x86-64 C Compiler CLI

Usage:
    python x64cc.py <input.c> [-o output] [-S] [--target linux|darwin] [--cc gcc]
                              [--tokens] [--ast] [--pretty] [--verbose] [--trace]

By default the program is compiled to <input>.s next to the source and
linked with the system C compiler into an executable named after the
source file (without extension). The executable's exit status is the
value of the return expression.

Examples:
    python x64cc.py return_2.c                    # -> return_2.s, ./return_2
    python x64cc.py prec.c -o prec --target darwin
    python x64cc.py prec.c -S -o -                # assembly to stdout
    python x64cc.py prec.c --tokens               # dump token stream
    python x64cc.py prec.c --trace                # log every pipeline step
"""

import argparse
import logging
import os
import sys

from x64_compiler import __version__, compile_source
from x64_compiler.ast_printer import format_program
from x64_compiler.codegen import CodeGenError
from x64_compiler.lexer import Lexer, LexerError
from x64_compiler.parser import Parser, ParseError
from x64_compiler.printer import TARGET_PROFILES
from x64_compiler.toolchain import ToolchainError, assemble, write_assembly

log = logging.getLogger("x64cc")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="x64cc",
        description="Tiny C compiler for x86-64 (GNU as output)",
        epilog="Targets: " + ", ".join(TARGET_PROFILES.keys()),
    )
    parser.add_argument("input", help="Input C source file")
    parser.add_argument("-o", "--output",
                        help="Output executable (or assembly file with -S; '-' for stdout)")
    parser.add_argument("-S", dest="asm_only", action="store_true",
                        help="Stop after writing assembly")
    parser.add_argument("--target", default="linux",
                        choices=list(TARGET_PROFILES.keys()),
                        help="Target platform (default: linux)")
    parser.add_argument("--cc", default="gcc",
                        help="C compiler driver used to assemble and link (default: gcc)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print compilation details to stderr")
    parser.add_argument("--trace", action="store_true",
                        help="Log every token, parse and emit step (implies --verbose)")
    parser.add_argument("--tokens", action="store_true",
                        help="Dump token stream and exit (debug)")
    parser.add_argument("--ast", action="store_true",
                        help="Dump AST and exit (debug)")
    parser.add_argument("--pretty", action="store_true",
                        help="Print the AST back as C source and exit (debug)")
    parser.add_argument("--version", action="version",
                        version=f"x64cc {__version__}")

    args = parser.parse_args(argv)

    if args.trace:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="[%(name)s] %(levelname)s: %(message)s", force=True)
    trace = log.debug if args.trace else None

    # Read input
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.input}: {e}", file=sys.stderr)
        return 1

    log.info("Input:  %s", args.input)
    log.info("Target: %s (%s)", args.target, TARGET_PROFILES[args.target]["description"])

    stem = os.path.splitext(args.input)[0]

    # Refuse output paths that would replace the source file
    if not (args.tokens or args.ast or args.pretty):
        if args.asm_only:
            outputs = [] if args.output == "-" else [args.output or stem + ".s"]
        else:
            outputs = [stem + ".s", args.output or stem]
        for path in outputs:
            if _same_path(path, args.input):
                print(f"Error: output {path} would overwrite input file {args.input}",
                      file=sys.stderr)
                return 1

    try:
        # Token dump mode
        if args.tokens:
            for tok in Lexer(source, trace=trace).tokenize():
                print(tok)
            return 0

        # AST dump modes
        if args.ast or args.pretty:
            tokens = Lexer(source, trace=trace).tokenize()
            ast = Parser(tokens, trace=trace).parse()
            if args.ast:
                _print_ast(ast)
            else:
                print(format_program(ast), end="")
            return 0

        asm_text = compile_source(source, target=args.target, trace=trace)
        log.info("Generated %d lines of assembly", asm_text.count("\n"))

        if args.asm_only:
            if args.output == "-":
                sys.stdout.write(asm_text)
            else:
                write_assembly(args.output or stem + ".s", asm_text)
            return 0

        asm_path = write_assembly(stem + ".s", asm_text)
        exe_path = assemble(asm_path, args.output or stem, cc=args.cc)
        log.info("Output: %s", exe_path)

    except LexerError as e:
        print(f"Lexer error: {e}", file=sys.stderr)
        return 1
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        return 1
    except CodeGenError as e:
        print(f"Code generation error: {e}", file=sys.stderr)
        return 1
    except ToolchainError as e:
        print(f"Toolchain error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal compiler error: {e}", file=sys.stderr)
        if args.verbose or args.trace:
            import traceback
            traceback.print_exc()
        return 2

    return 0


def _same_path(a, b):
    return os.path.realpath(a) == os.path.realpath(b)


def _print_ast(root, indent=0):
    """Pretty-print an AST node tree (debug helper).

    Uses an explicit work stack: operator chains nest one level per
    operator and can be far deeper than the recursion limit.
    """
    work = [(root, indent)]
    while work:
        node, indent = work.pop()
        prefix = "  " * indent
        if isinstance(node, str):
            print(node)
            continue
        if not hasattr(node, '__dataclass_fields__'):
            print(f"{prefix}{node!r}")
            continue
        print(f"{prefix}{type(node).__name__}:")
        pending = []
        for fname, fdef in node.__dataclass_fields__.items():
            if not fdef.compare:
                continue  # source positions
            val = getattr(node, fname)
            if hasattr(val, '__dataclass_fields__'):
                pending.append((f"{prefix}  {fname}:", 0))
                pending.append((val, indent + 2))
            else:
                pending.append((f"{prefix}  {fname}: {val!r}", 0))
        work.extend(reversed(pending))


if __name__ == "__main__":
    sys.exit(main())
