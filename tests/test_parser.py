"""
Parser tests for the x86-64 C Compiler.

Tests cover:
  - Function/statement structure
  - Precedence and associativity encoded in the tree shape
  - Unary operators, groups, hex/decimal constants
  - UnexpectedToken / UnexpectedFactor / ParseError reporting
  - Nesting depth bound
"""

import pytest
from x64_compiler.ast_nodes import (
    AdditiveOp, Constant, Function, Group, MultiplicativeOp, Program, Return, UnaryOp,
)
from x64_compiler.lexer import TokenType, tokenize
from x64_compiler.parser import (
    Parser, ParseError, UnexpectedFactor, UnexpectedToken, parse,
)


def _parse(source: str) -> Program:
    return parse(tokenize(source))


def _expr(text: str):
    """Parse `text` as the return expression of main."""
    return _parse(f"int main() {{ return {text}; }}").function.body.expr


C = Constant


# ─── Structure ────────────────────────────

class TestStructure:
    def test_return_2(self):
        assert _parse("int main() { return 2; }") == Program(
            Function("main", Return(C(2)))
        )

    def test_function_name(self):
        assert _parse("int foo() { return 0; }").function.name == "foo"

    def test_positions_recorded(self):
        prog = _parse("int main() {\n    return 1 + 2;\n}")
        add = prog.function.body.expr
        assert (add.line, add.col) == (2, 14)

    def test_tokens_consumed(self):
        tokens = tokenize("int main() { return 2; }")
        p = Parser(tokens)
        p.parse()
        assert len(p.tokens) == 0
        assert len(tokens) == 9  # caller's list is left alone


# ─── Precedence ───────────────────────────

class TestPrecedence:
    def test_multiplication_binds_tighter(self):
        expr = _expr("1+2*3")
        assert isinstance(expr, AdditiveOp)
        assert expr.op == "+"
        assert expr == AdditiveOp(C(1), "+", MultiplicativeOp(C(2), "*", C(3)))

    def test_group_overrides_precedence(self):
        expr = _expr("(1+2)*3")
        assert expr == MultiplicativeOp(Group(AdditiveOp(C(1), "+", C(2))), "*", C(3))

    def test_subtraction_left_associative(self):
        assert _expr("10-4-3") == AdditiveOp(AdditiveOp(C(10), "-", C(4)), "-", C(3))

    def test_division_left_associative(self):
        assert _expr("8/4/2") == MultiplicativeOp(MultiplicativeOp(C(8), "/", C(4)), "/", C(2))

    def test_mixed_chain(self):
        assert _expr("1*2+3/4-5") == AdditiveOp(
            AdditiveOp(MultiplicativeOp(C(1), "*", C(2)), "+", MultiplicativeOp(C(3), "/", C(4))),
            "-",
            C(5),
        )

    def test_unary_binds_tighter_than_binary(self):
        assert _expr("-5*2") == MultiplicativeOp(UnaryOp("-", C(5)), "*", C(2))

    def test_binary_minus_after_unary(self):
        assert _expr("1 - -2") == AdditiveOp(C(1), "-", UnaryOp("-", C(2)))


# ─── Factors ──────────────────────────────

class TestFactors:
    def test_stacked_unary(self):
        assert _expr("-~!5") == UnaryOp("-", UnaryOp("~", UnaryOp("!", C(5))))

    def test_unary_on_group(self):
        assert _expr("-(1)") == UnaryOp("-", Group(C(1)))

    def test_nested_groups(self):
        assert _expr("((7))") == Group(Group(C(7)))

    def test_hex_constant(self):
        assert _expr("0xFF") == C(255)
        assert _expr("0x10") == C(16)

    def test_largest_constant(self):
        assert _expr("4294967295") == C(0xFFFFFFFF)

    def test_constant_too_wide(self):
        with pytest.raises(ParseError) as exc:
            _expr("0x100000000")
        assert not isinstance(exc.value, UnexpectedToken)
        assert exc.value.token.type is TokenType.INT_HEX


# ─── Errors ───────────────────────────────

class TestErrors:
    def test_missing_expression(self):
        with pytest.raises(UnexpectedFactor) as exc:
            _parse("int main() { return ; }")
        assert exc.value.token.type is TokenType.SEMI
        assert "';'" in str(exc.value)

    def test_missing_semicolon(self):
        with pytest.raises(UnexpectedToken) as exc:
            _parse("int main() { return 2 }")
        assert exc.value.token.type is TokenType.RBRACE
        assert "';'" in exc.value.expected

    def test_dangling_operator(self):
        with pytest.raises(UnexpectedFactor):
            _parse("int main() { return 1 + ; }")

    def test_unclosed_group(self):
        with pytest.raises(UnexpectedToken) as exc:
            _parse("int main() { return (1 + 2; }")
        assert exc.value.expected == "')'"

    def test_missing_int(self):
        with pytest.raises(UnexpectedToken) as exc:
            _parse("main() { return 2; }")
        assert exc.value.token.type is TokenType.IDENT

    def test_missing_rparen_in_signature(self):
        with pytest.raises(UnexpectedToken) as exc:
            _parse("int main( { return 2; }")
        assert exc.value.token.type is TokenType.LBRACE

    def test_end_of_input(self):
        with pytest.raises(UnexpectedToken) as exc:
            _parse("int main() { return 2;")
        assert exc.value.token is None
        assert "end of input" in str(exc.value)

    def test_trailing_tokens(self):
        with pytest.raises(UnexpectedToken) as exc:
            _parse("int main() { return 2; } }")
        assert exc.value.expected == "end of input"

    def test_identifier_is_not_a_factor(self):
        with pytest.raises(UnexpectedFactor) as exc:
            _parse("int main() { return x; }")
        assert exc.value.token.value == "x"

    def test_message_has_position(self):
        with pytest.raises(UnexpectedFactor) as exc:
            _parse("int main() {\n  return ;\n}")
        assert "L2:10" in str(exc.value)


# ─── Nesting depth ────────────────────────

class TestNestingDepth:
    def test_deep_groups_rejected(self):
        text = "(" * 129 + "1" + ")" * 129
        with pytest.raises(ParseError) as exc:
            _expr(text)
        assert "nested deeper" in str(exc.value)

    def test_deep_unary_rejected(self):
        with pytest.raises(ParseError):
            _expr("-" * 129 + "1")

    def test_within_bound(self):
        text = "(" * 100 + "1" + ")" * 100
        expr = _expr(text)
        assert isinstance(expr, Group)

    def test_custom_bound(self):
        tokens = tokenize("int main() { return ((((1)))); }")
        with pytest.raises(ParseError):
            Parser(tokens, max_depth=3).parse()

    def test_sequential_groups_do_not_accumulate(self):
        text = " + ".join(["(1)"] * 200)
        assert isinstance(_expr(text), AdditiveOp)
