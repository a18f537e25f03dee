#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from conftest import has_error_code
from seq_ast import IntLiteral, RangeExpr
from seq_context import GeneratorContext, LogLevel
from seq_driver import SeqDriver


def test_generate_full_pipeline(generate):
    result = generate("1, {2..=4}, (2^4)")

    assert not result.has_errors()
    assert result.values == [1, 2, 3, 4, 16]
    assert len(result.tokens) == 13
    assert isinstance(result.nodes[1], RangeExpr)


def test_generate_empty_input(generate):
    result = generate("")

    assert not result.has_errors()
    assert result.values == []


def test_lexer_error_becomes_diagnostic(generate):
    result = generate("1, #")

    assert result.has_errors()
    assert result.tokens is None
    assert result.values is None
    assert has_error_code(result.diagnostics, "LEX-0010")
    diag = result.diagnostics[0]
    assert (diag.start, diag.end) == (4, 4)
    assert diag.code == "LEX-0010"


def test_parse_error_keeps_tokens(generate):
    result = generate("1,,2")

    assert result.has_errors()
    assert result.tokens is not None
    assert result.nodes is None
    assert has_error_code(result.diagnostics, "[PAR-0010]")


def test_evaluation_error_keeps_nodes(generate):
    result = generate("1, (1/0)")

    assert result.has_errors()
    assert result.nodes is not None
    assert result.values is None
    assert has_error_code(result.diagnostics, "PAR-0100")


def test_max_length_from_context(generate):
    result = generate("{1..100}", max_sequence_length=10)

    assert has_error_code(result.diagnostics, "PAR-0111")


def test_tokenize_and_parse_stop_early(silent_context):
    driver = SeqDriver(context=silent_context)

    tok_result = driver.tokenize("1, (1/0)")
    assert tok_result.tokens is not None
    assert tok_result.nodes is None

    parse_result = driver.parse("1, (1/0)")
    assert not parse_result.has_errors()
    assert parse_result.nodes[0] == IntLiteral(1)
    assert parse_result.values is None


def test_origin_is_recorded(silent_context):
    result = SeqDriver(context=silent_context).generate("1,", origin="<stdin>")

    assert result.origin == "<stdin>"
    assert result.diagnostics[0].origin == "<stdin>"


def test_stages_are_logged(capsys):
    context = GeneratorContext(log_level=LogLevel.DEBUG)
    SeqDriver(context=context).generate("{1..3}")

    err = capsys.readouterr().err
    assert "Lexing '<input>'" in err
    assert "Parsing '<input>'" in err
    assert "Evaluating '<input>'" in err
    assert "Sequence has 2 value(s)" in err


def test_default_context_is_quiet(capsys):
    SeqDriver().generate("{1..3}")

    assert capsys.readouterr().err == ""


@pytest.mark.parametrize(
    "src, expected",
    [
        ("{1..=5, s:2}", [1, 3, 5]),
        ("{5..=0, s:-2}", [5, 3, 1]),
        ("{1..=5, m:+2}", [3, 4, 5, 6, 7]),
        ("{1..=5, s:2, m:+2}", [3, 5, 7]),
        ("{(1-(10^2))..-108, s:3, m:*-1}", [99, 102, 105]),
        ("-1, -2, -3, {1..=3, s:2, m:+2}, (200^2+1)", [-1, -2, -3, 3, 5, 40001]),
        ("(1 + 2 - 3)", [0]),
        ("(-2^3 - (3*100/20))", [-23]),
    ],
)
def test_end_to_end_examples(generate, src, expected):
    result = generate(src)

    assert not result.has_errors(), [d.format() for d in result.diagnostics]
    assert result.values == expected


def test_bare_top_level_arithmetic_is_separate_items(generate):
    # Without parentheses, '+' and '-' are signs of new items (commas are optional),
    # so this is [1, 2, -3] rather than the sum 0.
    result = generate("1 + 2 - 3")

    assert not result.has_errors()
    assert result.values == [1, 2, -3]
    assert generate("(1 + 2 - 3)").values == [0]
