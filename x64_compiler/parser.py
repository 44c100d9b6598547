"""
Recursive-descent parser for the x86-64 C Compiler.

Parses a token list from the Lexer into an AST defined in ast_nodes.
Grammar (one method per rule):

    function   : 'int' IDENT '(' ')' '{' statement '}'
    statement  : 'return' expression ';'
    expression : term (('+' | '-') term)*
    term       : factor (('*' | '/') factor)*
    factor     : '(' expression ')' | ('-' | '~' | '!') factor | INTEGER

Tokens are consumed front to back and at most one token of look-ahead
is used. The first error aborts the parse; there is no recovery.
"""

from __future__ import annotations
from collections import deque
from typing import Callable, Deque, Iterable, Optional
from .lexer import Token, TokenType
from .ast_nodes import *


DEFAULT_MAX_DEPTH = 128
MAX_CONSTANT = 0xFFFFFFFF


class ParseError(Exception):
    def __init__(self, message: str, token: Optional[Token]):
        self.token = token
        if token is None:
            super().__init__(f"Parse error at end of input: {message}")
        else:
            loc = f"L{token.line}:{token.col}"
            super().__init__(f"Parse error at {loc}: {message} (got {token.describe()})")


class UnexpectedToken(ParseError):
    """The next token does not fit the grammar at this point."""

    def __init__(self, token: Optional[Token], expected: str):
        self.expected = expected
        super().__init__(f"Expected {expected}", token)


class UnexpectedFactor(UnexpectedToken):
    """No factor (parenthesis, unary operator or integer) starts at this token."""

    def __init__(self, token: Optional[Token]):
        super().__init__(token, "an integer, '(' or a unary operator")


_BINARY_OPS = {
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
}

_UNARY_OPS = {
    TokenType.MINUS: "-",
    TokenType.TILDE: "~",
    TokenType.BANG: "!",
}


class Parser:
    """Recursive descent parser producing an AST from tokens."""

    def __init__(self, tokens: Iterable[Token],
                 trace: Optional[Callable[[str], None]] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens: Deque[Token] = deque(tokens)
        self.trace = trace
        self.max_depth = max_depth
        self._depth = 0

    # ── Helpers ─────────────────────────────

    def _peek(self) -> Optional[Token]:
        return self.tokens[0] if self.tokens else None

    def _at(self, *types: TokenType) -> bool:
        tok = self._peek()
        return tok is not None and tok.type in types

    def _advance(self) -> Token:
        return self.tokens.popleft()

    def _expect(self, ttype: TokenType, expected: str = "") -> Token:
        if not self._at(ttype):
            raise UnexpectedToken(self._peek(), expected or repr(ttype.value))
        return self._advance()

    def _enter(self, tok: Token):
        """Track nesting of groups and unary operators."""
        self._depth += 1
        if self._depth > self.max_depth:
            raise ParseError(f"Expression nested deeper than {self.max_depth} levels", tok)

    def _leave(self):
        self._depth -= 1

    # ── Top level ─────────────────────────────

    def parse(self) -> Program:
        """Parse the full token stream into a Program AST."""
        func = self.parse_function()
        if self.tokens:
            raise UnexpectedToken(self._peek(), "end of input")
        return Program(func, line=func.line, col=func.col)

    def parse_function(self) -> Function:
        """Parse function definition: int name() { statement }"""
        tok = self._expect(TokenType.KW_INT, "'int'")
        name_tok = self._expect(TokenType.IDENT, "function name")
        self._expect(TokenType.LPAREN)
        self._expect(TokenType.RPAREN)
        self._expect(TokenType.LBRACE)
        body = self.parse_statement()
        self._expect(TokenType.RBRACE)
        if self.trace:
            self.trace(f"parse: function {name_tok.value}")
        return Function(name_tok.value, body, line=tok.line, col=tok.col)

    def parse_statement(self) -> Return:
        tok = self._expect(TokenType.KW_RETURN, "'return'")
        expr = self.parse_expression()
        self._expect(TokenType.SEMI, "';' after return value")
        return Return(expr, line=tok.line, col=tok.col)

    # ── Expressions ───────────────────────────

    def parse_expression(self) -> Expression:
        left = self.parse_term()
        while self._at(TokenType.PLUS, TokenType.MINUS):
            tok = self._advance()
            right = self.parse_term()
            left = AdditiveOp(left, _BINARY_OPS[tok.type], right,
                              line=tok.line, col=tok.col)
        return left

    def parse_term(self) -> Term:
        left = self.parse_factor()
        while self._at(TokenType.STAR, TokenType.SLASH):
            tok = self._advance()
            right = self.parse_factor()
            left = MultiplicativeOp(left, _BINARY_OPS[tok.type], right,
                                    line=tok.line, col=tok.col)
        return left

    def parse_factor(self) -> Factor:
        tok = self._peek()
        if tok is None:
            raise UnexpectedFactor(None)

        # Parenthesized expression
        if tok.type is TokenType.LPAREN:
            self._advance()
            self._enter(tok)
            expr = self.parse_expression()
            self._leave()
            self._expect(TokenType.RPAREN, "')'")
            return Group(expr, line=tok.line, col=tok.col)

        # Unary minus, bitwise NOT, logical NOT
        if tok.type in _UNARY_OPS:
            self._advance()
            self._enter(tok)
            operand = self.parse_factor()
            self._leave()
            return UnaryOp(_UNARY_OPS[tok.type], operand, line=tok.line, col=tok.col)

        # Integer literal
        if tok.type.base is not None:
            self._advance()
            return Constant(self._decode_int(tok), line=tok.line, col=tok.col)

        raise UnexpectedFactor(tok)

    def _decode_int(self, tok: Token) -> int:
        text = tok.value
        if tok.type is TokenType.INT_HEX:
            text = text[2:]  # strip '0x'
        value = int(text, tok.type.base)
        if value > MAX_CONSTANT:
            raise ParseError("Integer constant does not fit in 32 bits", tok)
        return value


def parse(tokens: Iterable[Token], trace: Optional[Callable[[str], None]] = None,
          max_depth: int = DEFAULT_MAX_DEPTH) -> Program:
    return Parser(tokens, trace=trace, max_depth=max_depth).parse()
