#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from typing import Iterator, List, NoReturn, Optional

from seq_ast import Node, IntLiteral, MathExpr, RangeExpr, Span
from seq_context import GeneratorContext
from seq_internal_error import ICELocation, InternalSequenceError
from seq_lexer import Op, Token, TokenKind, I64_MAX, I64_MIN
from seq_logger import log_debug
from seq_parser import ParseError, ParseErrorKind, parse_error
from seq_range import iter_range


# ==========================
# Evaluation
# ==========================

class Evaluator:
    """
    Reduces parsed nodes to integers.

    Arithmetic faults (division by zero, negative exponents, results
    outside the signed 64-bit range) are reported as ParseError scoped to
    the offending operator. Broken postfix invariants are internal errors.
    """

    def __init__(
            self,
            source: str = "",
            context: GeneratorContext | None = None,
            origin: Optional[str] = None,
    ) -> None:
        self.source = source
        self.origin = origin
        self.context = context or GeneratorContext.default()

    # --- arithmetic ---

    def evaluate_math(self, expr: MathExpr, placeholder: Optional[int] = None) -> int:
        stack: List[int] = []
        for tok in expr.postfix:
            if tok.kind is TokenKind.INT:
                stack.append(tok.value)
            elif tok.kind is TokenKind.RANGE_MUTATION_ARG:
                if placeholder is None:
                    self._ice("[ICE-0020] '@' placeholder evaluated without a range position", tok.span)
                stack.append(placeholder)
            elif tok.kind is TokenKind.OPERATOR:
                if tok.op.is_unary:
                    if not stack:
                        self._ice("[ICE-0010] operand stack underflow", tok.span)
                    value = stack.pop()
                    stack.append(self._check_i64(-value if tok.op is Op.UNARY_SUB else value, tok))
                else:
                    if len(stack) < 2:
                        self._ice("[ICE-0010] operand stack underflow", tok.span)
                    rhs = stack.pop()
                    lhs = stack.pop()
                    stack.append(self._apply(tok, lhs, rhs))
            else:
                self._ice(f"[ICE-0030] unexpected token {tok!r} in postfix expression", tok.span)
        if len(stack) != 1:
            self._ice(f"[ICE-0011] postfix expression left {len(stack)} value(s) on the stack", expr.span)
        return stack[0]

    def _apply(self, tok: Token, lhs: int, rhs: int) -> int:
        op = tok.op
        if op is Op.ADD:
            result = lhs + rhs
        elif op is Op.SUB:
            result = lhs - rhs
        elif op is Op.MUL:
            result = lhs * rhs
        elif op is Op.DIV or op is Op.MOD:
            if rhs == 0:
                raise parse_error(ParseErrorKind.DIVISION_BY_ZERO,
                                  f"division by zero at position {tok.span.start}", self.source, tok.span)
            quotient = abs(lhs) // abs(rhs)
            if (lhs < 0) != (rhs < 0):
                quotient = -quotient
            result = quotient if op is Op.DIV else lhs - rhs * quotient
        elif op is Op.POW:
            if rhs < 0:
                raise parse_error(ParseErrorKind.NEGATIVE_EXPONENT,
                                  f"negative exponent {rhs} at position {tok.span.start}", self.source, tok.span)
            if abs(lhs) > 1 and rhs >= 64:
                raise self._overflow(tok)
            result = lhs ** rhs
        else:
            self._ice(f"[ICE-0031] operator {op.name} is not binary", tok.span)
        return self._check_i64(result, tok)

    def _check_i64(self, value: int, tok: Token) -> int:
        if value < I64_MIN or value > I64_MAX:
            raise self._overflow(tok)
        return value

    def _overflow(self, tok: Token) -> ParseError:
        return parse_error(ParseErrorKind.INTEGER_OVERFLOW,
                           f"integer overflow at operator '{tok.text}' (position {tok.span.start})",
                           self.source, tok.span)

    def _ice(self, message: str, span: Optional[Span]) -> NoReturn:
        raise InternalSequenceError(message, ICELocation(origin=self.origin, span=span))

    # --- nodes ---

    def evaluate_scalar(self, node: Node) -> int:
        if isinstance(node, IntLiteral):
            return node.value
        if isinstance(node, MathExpr):
            return self.evaluate_math(node)
        self._ice(f"[ICE-0040] {type(node).__name__} does not evaluate to a single integer", node.span)

    def expand_range(self, node: RangeExpr) -> Iterator[int]:
        start = self.evaluate_scalar(node.start)
        end = self.evaluate_scalar(node.end)
        step = None
        if node.step is not None:
            step = self.evaluate_scalar(node.step)
            if step == 0:
                span = node.step.span or node.span
                where = f" (position {span.start})" if span is not None else ""
                raise parse_error(ParseErrorKind.ZERO_STEP, f"range step must be non-zero{where}", self.source, span)
        log_debug(self.context, f"Expanding range {start}{'..=' if node.inclusive else '..'}{end}, step {step}")
        for pos in iter_range(start, end, node.inclusive, step):
            if node.mutation is None:
                yield pos
            else:
                yield self.evaluate_math(node.mutation, placeholder=pos)

    def materialize(self, node: RangeExpr) -> List[int]:
        return list(self.expand_range(node))

    def evaluate_and_materialize(self, nodes: List[Node]) -> List[int]:
        values: List[int] = []
        limit = self.context.max_sequence_length
        for node in nodes:
            if isinstance(node, RangeExpr):
                produced = self.expand_range(node)
            else:
                produced = iter((self.evaluate_scalar(node),))
            for value in produced:
                if limit is not None and len(values) >= limit:
                    raise parse_error(ParseErrorKind.SEQUENCE_TOO_LONG,
                                      f"sequence exceeds the maximum length of {limit}", self.source, node.span)
                values.append(value)
        return values


def evaluate_math(expr: MathExpr, source: str = "", placeholder: Optional[int] = None) -> int:
    return Evaluator(source).evaluate_math(expr, placeholder)


def materialize(node: RangeExpr, source: str = "") -> List[int]:
    return Evaluator(source).materialize(node)


def evaluate_and_materialize(
        nodes: List[Node],
        source: str = "",
        context: GeneratorContext | None = None,
) -> List[int]:
    return Evaluator(source, context).evaluate_and_materialize(nodes)
