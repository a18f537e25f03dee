#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from seq_ast import IntLiteral, MathExpr, RangeExpr, Span
from seq_lexer import Op, TokenKind, lex
from seq_parser import Parser, parse


def _parse(src: str):
    return parse(src, lex(src))


def _rpn(expr: MathExpr) -> list[str]:
    return [tok.text for tok in expr.postfix]


def test_empty_input():
    assert _parse("") == []


def test_double_minus_is_positive():
    nodes = _parse("--10")

    assert nodes == [IntLiteral(10)]
    assert nodes[0].span == Span(1, 4)


def test_minus_plus_is_negative():
    nodes = _parse("-+10")

    assert nodes == [IntLiteral(-10)]
    assert nodes[0].span == Span(1, 4)


def test_items_without_commas():
    # zero or one comma between items
    assert _parse("1 2, -3") == [IntLiteral(1), IntLiteral(2), IntLiteral(-3)]
    assert _parse("1 + 2 - 3") == [IntLiteral(1), IntLiteral(2), IntLiteral(-3)]


def test_math_item_postfix_order():
    nodes = _parse("(1 + 2 * 3)")

    assert len(nodes) == 1
    assert isinstance(nodes[0], MathExpr)
    assert _rpn(nodes[0]) == ["1", "2", "3", "*", "+"]
    assert nodes[0].span == Span(1, 11)


def test_binary_operators_are_left_associative():
    (expr,) = _parse("(8 - 3 - 2)")
    assert _rpn(expr) == ["8", "3", "-", "2", "-"]

    (expr,) = _parse("(2 ^ 3 ^ 2)")
    assert _rpn(expr) == ["2", "3", "^", "2", "^"]


def test_unary_binds_tighter_than_power():
    (expr,) = _parse("(-2^3)")

    assert _rpn(expr) == ["2", "-", "3", "^"]
    assert expr.postfix[1].op is Op.UNARY_SUB


def test_nested_groups():
    (expr,) = _parse("((1 + 2) * (3 - 4))")

    assert _rpn(expr) == ["1", "2", "+", "3", "4", "-", "*"]


def test_simple_range():
    (node,) = _parse("{1..=5}")

    assert node == RangeExpr(IntLiteral(1), IntLiteral(5), inclusive=True)
    assert node.span == Span(1, 7)


def test_range_with_step_and_mutation():
    (node,) = _parse("{1..=5, s:2, m:+2}")

    assert isinstance(node, RangeExpr)
    assert node.step == IntLiteral(2)
    assert isinstance(node.mutation, MathExpr)
    assert _rpn(node.mutation) == ["@", "2", "+"]
    assert node.mutation.postfix[0].kind is TokenKind.RANGE_MUTATION_ARG


def test_range_arguments_in_any_order():
    (node,) = _parse("{10..0, m:@*2, s:-3}")

    assert node.step == IntLiteral(-3)
    assert _rpn(node.mutation) == ["@", "2", "*"]
    assert not node.inclusive


def test_range_bounds_accept_bare_arithmetic():
    (node,) = _parse("{1+1..2*5}")

    assert isinstance(node.start, MathExpr)
    assert _rpn(node.start) == ["1", "1", "+"]
    assert _rpn(node.end) == ["2", "5", "*"]


def test_range_with_signed_literal_bounds():
    (node,) = _parse("{-3..--3}")

    assert node.start == IntLiteral(-3)
    assert node.end == IntLiteral(3)


def test_mutation_with_explicit_placeholder_in_group():
    (node,) = _parse("{1..4, m:(@ + 1) * @}")

    assert _rpn(node.mutation) == ["@", "1", "+", "@", "*"]


def test_mutation_with_negative_operand():
    (node,) = _parse("{(1-(10^2))..-108, s:3, m:*-1}")

    assert _rpn(node.start) == ["1", "10", "2", "^", "-"]
    assert node.end == IntLiteral(-108)
    assert _rpn(node.mutation) == ["@", "1", "-", "*"]


def test_mixed_items_and_spans():
    src = "-1, -2, -3, {1..=3, s:2, m:+2}, (200^2+1)"
    nodes = Parser.from_source(src).parse()

    assert [type(n).__name__ for n in nodes] == [
        "IntLiteral", "IntLiteral", "IntLiteral", "RangeExpr", "MathExpr",
    ]
    assert nodes[3].span.text(src) == "{1..=3, s:2, m:+2}"
    assert nodes[4].span.text(src) == "(200^2+1)"
