#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

from seq_ast import Span
from seq_ast_printer import format_node, format_nodes
from seq_parser import Parser


def parse(src: str):
    return Parser.from_source(src).parse()


def test_ast_printer_includes_spans_in_header_lines():
    printed = format_nodes(parse("--10, (1 + 2 * 3)"))

    assert "IntLiteral(value=10) @1-4" in printed
    assert "MathExpr[1 2 3 * +] @7-17" in printed


def test_range_children_are_indented():
    lines = format_node(parse("{1..=5, s:2, m:+2}")[0])

    assert lines == [
        "RangeExpr(inclusive=True) @1-18",
        "  start:",
        "    IntLiteral(value=1) @2-2",
        "  end:",
        "    IntLiteral(value=5) @6-6",
        "  step:",
        "    IntLiteral(value=2) @11-11",
        "  mutation:",
        "    MathExpr[@ 2 +] @16-17",
    ]


def test_optional_children_are_omitted():
    printed = format_nodes(parse("{1..3}"))

    assert "step:" not in printed
    assert "mutation:" not in printed
    assert "RangeExpr(inclusive=False) @1-6" in printed


def test_span_text():
    src = "1, {2..=4}"
    node = parse(src)[1]

    assert node.span == Span(4, 10)
    assert node.span.text(src) == "{2..=4}"
    assert Span(1, 1).merge(Span(5, 9)) == Span(1, 9)
