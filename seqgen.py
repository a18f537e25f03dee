#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

import argparse
import sys

from seq_ast_printer import format_nodes
from seq_context import GeneratorContext, LogLevel
from seq_diagnostics import Diagnostic
from seq_driver import GenerationResult, SeqDriver
from seq_internal_error import InternalSequenceError
from seq_logger import log_error


def print_diagnostics(result: GenerationResult, context: GeneratorContext) -> None:
    for diag in result.diagnostics:
        print_diagnostic_with_snippet(diag, context)


def print_diagnostic_with_snippet(diag: Diagnostic, context: GeneratorContext) -> None:
    # First line: header
    log_error(context, diag.format())

    if diag.source is None or diag.start is None:
        return

    # Spans are character offsets; locate the line holding the start
    source = diag.source
    before = source[:diag.start - 1]
    line_no = before.count("\n") + 1
    line_start = before.rfind("\n") + 1
    src_line = source[line_start:].split("\n", 1)[0]

    width = max(5, len(str(line_no)))
    gutter = f"{line_no:>{width}} | "
    log_error(context, gutter + src_line)

    start_col = diag.start - line_start
    end = diag.end if diag.end is not None else diag.start
    end_col = min(end - line_start, len(src_line))
    caret_width = max(1, end_col - start_col + 1)
    caret_prefix = " " * width + " | " + " " * (start_col - 1)
    log_error(context, caret_prefix + "^" * caret_width)


def build_generator_context(args: argparse.Namespace) -> GeneratorContext:
    """Build a GeneratorContext from command-line arguments."""
    log_rich_format = getattr(args, 'log', False)

    # Convert verbosity count to LogLevel
    verbosity = getattr(args, 'verbosity', 0)
    if verbosity >= 3:
        log_level = LogLevel.DEBUG
    elif verbosity >= 1:
        log_level = LogLevel.INFO
    else:
        log_level = LogLevel.ERROR

    return GeneratorContext(
        log_rich_format=log_rich_format,
        log_level=log_level,
        max_sequence_length=getattr(args, 'max_length', None),
    )


def _read_expression(args: argparse.Namespace) -> tuple[str, str]:
    """Return (text, origin) for the EXPR argument; '-' reads stdin."""
    if args.expr == "-":
        return sys.stdin.read().rstrip("\n"), "<stdin>"
    return args.expr, "<input>"


def _run(args: argparse.Namespace, stage: str):
    """Run the pipeline up to `stage`, returning (result, context, exit_code)."""
    context = build_generator_context(args)
    text, origin = _read_expression(args)
    driver = SeqDriver(context=context)
    try:
        result = getattr(driver, stage)(text, origin)
    except InternalSequenceError as e:
        log_error(context, e.format())
        return None, context, 1
    print_diagnostics(result, context=context)
    exit_code = 1 if result.has_errors() else 0
    return result, context, exit_code


def cmd_eval(args: argparse.Namespace) -> int:
    """Generate the sequence and print it on one line."""
    result, _, exit_code = _run(args, "generate")
    if exit_code != 0:
        return exit_code
    print(args.separator.join(str(v) for v in result.values))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    _, _, exit_code = _run(args, "generate")
    return exit_code


def cmd_tok(args: argparse.Namespace) -> int:
    result, _, exit_code = _run(args, "tokenize")
    if exit_code != 0:
        return exit_code
    for tok in result.tokens:
        # Format: start-end: KIND  'text'
        print(f"{tok.span.start}-{tok.span.end}:\t{tok.kind.name:<18} {tok.text!r}")
    return 0


def cmd_ast(args: argparse.Namespace) -> int:
    """Pretty-print the parsed items."""
    result, _, exit_code = _run(args, "parse")
    if exit_code != 0:
        return exit_code
    if result.nodes:
        print(format_nodes(result.nodes))
    return 0


def _add_expr_arg(parser: argparse.ArgumentParser) -> None:
    """Add the expression argument."""
    parser.add_argument("expr", help="Sequence expression (e.g. '1, {2..=5, s:2}'), or '-' to read stdin")


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog="seqgen", description="Integer sequence generator")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    parser.add_argument("-v", "--verbose",
                        action='count',
                        default=0,
                        dest='verbosity',
                        help="Increase verbosity: -v=INFO, -vvv=DEBUG")
    parser.add_argument("-l", "--log",
                        action='store_true',
                        default=False,
                        help="Enable rich log formatting (timestamps, levels)")
    parser.add_argument(
        "--max-length",
        type=_positive_int,
        default=None,
        help="Fail when the generated sequence would exceed this many values",
    )

    ###########################
    # eval command
    ###########################
    p_eval = subparsers.add_parser("eval", help="Generate and print the sequence", aliases=["gen"])
    p_eval.add_argument("--separator", "-s", default=", ",
                        help="Separator between printed values (default: ', ')")
    _add_expr_arg(p_eval)
    p_eval.set_defaults(func=cmd_eval)

    ###########################
    # check command
    ###########################
    p_check = subparsers.add_parser("check", help="Validate an expression without printing it")
    _add_expr_arg(p_check)
    p_check.set_defaults(func=cmd_check)

    ###########################
    # tok command
    ###########################
    p_tok = subparsers.add_parser("tok", help="Dump lexer tokens", aliases=["tokens"])
    _add_expr_arg(p_tok)
    p_tok.set_defaults(func=cmd_tok)

    ###########################
    # ast command
    ###########################
    p_ast = subparsers.add_parser("ast", help="Pretty-print the parsed items")
    _add_expr_arg(p_ast)
    p_ast.set_defaults(func=cmd_ast)

    args = parser.parse_args(argv)

    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
