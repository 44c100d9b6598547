"""
Lexer / Tokenizer for the x86-64 C Compiler.

Converts C source text into a list of tokens for the parser.
The vocabulary is deliberately tiny: braces, parentheses and ';',
the operators - ~ ! + * /, the keywords 'int' and 'return',
decimal and 0x-prefixed hexadecimal integers, and identifiers.

Tokenizing is table driven: TOKEN_SHAPES is tried in order at the
cursor and the first regex that matches wins.
"""

from __future__ import annotations
import enum
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern, Tuple


# ──────────────────────────────────────────────
# Token kinds and types
# ──────────────────────────────────────────────

class TokenKind(enum.Enum):
    SYMBOL = "symbol"
    OPERATOR = "operator"
    KEYWORD = "keyword"
    INTEGER = "integer"
    IDENTIFIER = "identifier"


class TokenType(enum.Enum):
    # Symbols
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    SEMI = ";"

    # Operators
    MINUS = "-"
    TILDE = "~"
    BANG = "!"
    PLUS = "+"
    STAR = "*"
    SLASH = "/"

    # Keywords
    KW_INT = "int"
    KW_RETURN = "return"

    # Literals
    INT_HEX = "INT_HEX"
    INT_DECIMAL = "INT_DECIMAL"

    # Identifier
    IDENT = "IDENT"

    @property
    def kind(self) -> TokenKind:
        return _KINDS[self]

    @property
    def base(self) -> Optional[int]:
        """Numeric base of an integer literal type, None for everything else."""
        return _BASES.get(self)


_KINDS = {
    TokenType.LBRACE: TokenKind.SYMBOL,
    TokenType.RBRACE: TokenKind.SYMBOL,
    TokenType.LPAREN: TokenKind.SYMBOL,
    TokenType.RPAREN: TokenKind.SYMBOL,
    TokenType.SEMI: TokenKind.SYMBOL,
    TokenType.MINUS: TokenKind.OPERATOR,
    TokenType.TILDE: TokenKind.OPERATOR,
    TokenType.BANG: TokenKind.OPERATOR,
    TokenType.PLUS: TokenKind.OPERATOR,
    TokenType.STAR: TokenKind.OPERATOR,
    TokenType.SLASH: TokenKind.OPERATOR,
    TokenType.KW_INT: TokenKind.KEYWORD,
    TokenType.KW_RETURN: TokenKind.KEYWORD,
    TokenType.INT_HEX: TokenKind.INTEGER,
    TokenType.INT_DECIMAL: TokenKind.INTEGER,
    TokenType.IDENT: TokenKind.IDENTIFIER,
}

_BASES = {
    TokenType.INT_HEX: 16,
    TokenType.INT_DECIMAL: 10,
}


# ──────────────────────────────────────────────
# Token data class
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Optional[str] = None     # matched text, integer and identifier tokens only
    line: int = field(default=1, compare=False)
    col: int = field(default=1, compare=False)

    @property
    def kind(self) -> TokenKind:
        return self.type.kind

    def describe(self) -> str:
        """Human-readable form used in diagnostics: "';'", "identifier 'main'"."""
        if self.value is None:
            return f"{self.type.value!r}"
        return f"{self.kind.value} {self.value!r}"

    def __repr__(self):
        if self.value is None:
            return f"Token({self.type.name}, L{self.line}:{self.col})"
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


# ──────────────────────────────────────────────
# Token shapes (priority order)
# ──────────────────────────────────────────────

# Symbols and operators before keywords before literals before identifiers.
# Hex must come before decimal: "[0-9]+" would otherwise take the leading 0.
TOKEN_SHAPES: List[Tuple[str, TokenType]] = [
    (r"\{", TokenType.LBRACE),
    (r"\}", TokenType.RBRACE),
    (r"\(", TokenType.LPAREN),
    (r"\)", TokenType.RPAREN),
    (r";", TokenType.SEMI),
    (r"-", TokenType.MINUS),
    (r"~", TokenType.TILDE),
    (r"!", TokenType.BANG),
    (r"\+", TokenType.PLUS),
    (r"\*", TokenType.STAR),
    (r"/", TokenType.SLASH),
    (r"int", TokenType.KW_INT),
    (r"return", TokenType.KW_RETURN),
    (r"0x[0-9a-fA-F]+", TokenType.INT_HEX),
    (r"[0-9]+", TokenType.INT_DECIMAL),
    (r"[a-zA-Z]+", TokenType.IDENT),
]

_CAPTURED = (TokenKind.INTEGER, TokenKind.IDENTIFIER)

_WHITESPACE = re.compile(r"\s*")


def _compile_shape(regex: str, ttype: TokenType) -> Pattern[str]:
    # Keywords are word-bounded so that "intx" lexes as a single identifier.
    bound = r"\b" if ttype.kind is TokenKind.KEYWORD else ""
    return re.compile(f"({regex}){bound}\\s*")


_PATTERNS: List[Tuple[Pattern[str], TokenType]] = [
    (_compile_shape(regex, ttype), ttype) for regex, ttype in TOKEN_SHAPES
]


# ──────────────────────────────────────────────
# Lexer
# ──────────────────────────────────────────────

class LexerError(Exception):
    def __init__(self, message: str, line: int, col: int):
        self.line = line
        self.col = col
        super().__init__(f"Lexer error at L{line}:{col}: {message}")


class UnrecognizedToken(LexerError):
    """No token shape matches the text at the cursor."""

    def __init__(self, remaining: str, line: int, col: int):
        self.remaining = remaining
        snippet = remaining.splitlines()[0] if remaining else ""
        if len(snippet) > 20:
            snippet = snippet[:20] + "..."
        super().__init__(f"Unrecognized token at {snippet!r}", line, col)


class Lexer:
    """Tokenizes C source into a list of Tokens."""

    def __init__(self, source: str, trace: Optional[Callable[[str], None]] = None):
        self.source = source
        self.trace = trace
        self.pos = 0
        self.line = 1
        self.col = 1
        self.tokens: List[Token] = []

    def _advance_to(self, end: int):
        """Move the cursor to end, keeping line/col in step."""
        consumed = self.source[self.pos:end]
        newlines = consumed.count("\n")
        if newlines:
            self.line += newlines
            self.col = len(consumed) - consumed.rindex("\n")
        else:
            self.col += len(consumed)
        self.pos = end

    def _match_token(self) -> Token:
        for pattern, ttype in _PATTERNS:
            m = pattern.match(self.source, self.pos)
            if m is None:
                continue
            value = m.group(1) if ttype.kind in _CAPTURED else None
            tok = Token(ttype, value, self.line, self.col)
            self._advance_to(m.end())
            return tok
        raise UnrecognizedToken(self.source[self.pos:], self.line, self.col)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source and return a list of tokens."""
        self.tokens = []
        self._advance_to(_WHITESPACE.match(self.source, self.pos).end())

        while self.pos < len(self.source):
            tok = self._match_token()
            if self.trace:
                self.trace(f"lex: {tok!r}")
            self.tokens.append(tok)

        return self.tokens


def tokenize(source: str, trace: Optional[Callable[[str], None]] = None) -> List[Token]:
    return Lexer(source, trace=trace).tokenize()
