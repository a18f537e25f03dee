#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass, replace
from enum import Enum
from typing import FrozenSet, List, Optional

from seq_ast import Span, Node, IntLiteral, MathExpr, RangeExpr, Bound
from seq_lexer import TokenKind, Token, Op, Lexer


# ==========================
# Parser
# ==========================

MAX_PAREN_DEPTH = 69


class ParseErrorKind(Enum):
    UNEXPECTED_COMMA = "PAR-0010"
    UNEXPECTED_MATH_OP = "PAR-0020"
    INCOMPLETE_INT = "PAR-0030"
    INVALID_INT = "PAR-0031"
    EMPTY_PAREN = "PAR-0040"
    INCOMPLETE_MATH_EXPR = "PAR-0050"
    INVALID_MATH_EXPR = "PAR-0051"
    INVALID_MATH_OP = "PAR-0052"
    UNMATCHED_PAREN = "PAR-0060"
    TOO_MANY_PAREN = "PAR-0061"
    UNMATCHED_BRACE = "PAR-0070"
    MISSING_RANGE_OP = "PAR-0071"
    INVALID_RANGE_ARG = "PAR-0072"
    DUPLICATE_RANGE_ARG = "PAR-0073"
    MISPLACED_PLACEHOLDER = "PAR-0074"

    # evaluation faults, reported like structural errors
    DIVISION_BY_ZERO = "PAR-0100"
    NEGATIVE_EXPONENT = "PAR-0101"
    INTEGER_OVERFLOW = "PAR-0102"
    ZERO_STEP = "PAR-0110"
    SEQUENCE_TOO_LONG = "PAR-0111"


@dataclass
class ParseError(Exception):
    kind: ParseErrorKind
    message: str
    source: str
    span: Optional[Span]  # None only for hand-built nodes without spans

    @property
    def code(self) -> str:
        return self.kind.value


def parse_error(kind: ParseErrorKind, message: str, source: str, span: Optional[Span]) -> ParseError:
    return ParseError(kind, f"[{kind.value}] {message}", source, span)


RANGE_OPS = frozenset({TokenKind.RANGE_EXCLUSIVE, TokenKind.RANGE_INCLUSIVE})
# tokens that end a range bound (start or end/step/mutation)
RANGE_START_STOP = RANGE_OPS | {TokenKind.COMMA, TokenKind.RBRACE}
RANGE_ARG_STOP = frozenset({TokenKind.COMMA, TokenKind.RBRACE})
GROUP_STOP = frozenset({TokenKind.RPAREN})

SIGN_OPS = (Op.ADD, Op.SUB)


class Parser:
    def __init__(self, source: str, tokens: List[Token]) -> None:
        self.source = source
        self.tokens = tokens
        self.index = 0
        self._parens_checked = False

    @classmethod
    def from_source(cls, source: str) -> "Parser":
        tokens = Lexer.from_source(source).tokenize()
        return cls(source, tokens)

    # --- token utilities ---

    def _peek(self, offset: int = 0) -> Optional[Token]:
        i = self.index + offset
        if i < len(self.tokens):
            return self.tokens[i]
        return None

    def _last(self) -> Token:
        return self.tokens[self.index - 1 if self.index > 0 else 0]

    def _at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def _check(self, kind: TokenKind) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind is kind

    def _check_sign(self) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind is TokenKind.OPERATOR and tok.op in SIGN_OPS

    def _error(self, kind: ParseErrorKind, message: str, span: Span) -> ParseError:
        return parse_error(kind, message, self.source, span)

    # --- entry point ---

    def parse(self) -> List[Node]:
        nodes: List[Node] = []
        while not self._at_end():
            nodes.append(self._parse_item())
            self._skip_separator()
        return nodes

    def _skip_separator(self) -> None:
        # zero or one comma between items, never a trailing one
        if not self._check(TokenKind.COMMA):
            return
        comma = self._advance()
        nxt = self._peek()
        if nxt is None:
            raise self._error(ParseErrorKind.UNEXPECTED_COMMA,
                              f"unexpected trailing comma at position {comma.span.start}", comma.span)
        if nxt.kind is TokenKind.COMMA:
            raise self._error(ParseErrorKind.UNEXPECTED_COMMA,
                              f"unexpected comma at position {nxt.span.start}", nxt.span)

    # --- items ---

    def _parse_item(self) -> Node:
        tok = self._peek()
        kind = tok.kind
        if kind is TokenKind.INT:
            return self._parse_int()
        if kind is TokenKind.OPERATOR:
            if tok.op in SIGN_OPS:
                return self._parse_int()
            raise self._error(ParseErrorKind.UNEXPECTED_MATH_OP,
                              f"unexpected math operator '{tok.text}' at position {tok.span.start}", tok.span)
        if kind is TokenKind.COMMA:
            raise self._error(ParseErrorKind.UNEXPECTED_COMMA,
                              f"unexpected comma at position {tok.span.start}", tok.span)
        if kind is TokenKind.LPAREN:
            return self._parse_math_item()
        if kind is TokenKind.LBRACE:
            return self._parse_range()
        if kind is TokenKind.RPAREN:
            raise self._error(ParseErrorKind.UNMATCHED_PAREN,
                              f"unmatched parenthesis at position {tok.span.start}", tok.span)
        if kind is TokenKind.RBRACE:
            raise self._error(ParseErrorKind.UNMATCHED_BRACE,
                              f"unmatched brace at position {tok.span.start}", tok.span)
        raise self._error(ParseErrorKind.INVALID_INT,
                          f"expected a number at position {tok.span.start}, found '{tok.text}'", tok.span)

    def _parse_int(self) -> IntLiteral:
        # ('+'|'-')* INT, sign is the parity of '-'
        first = self._peek()
        negative = False
        while self._check_sign():
            if self._advance().op is Op.SUB:
                negative = not negative
        tok = self._peek()
        if tok is None:
            last = self._last()
            raise self._error(ParseErrorKind.INCOMPLETE_INT,
                              f"expected a number after the math operator '{last.text}' at position {last.span.start}",
                              last.span)
        if tok.kind is not TokenKind.INT:
            raise self._error(ParseErrorKind.INVALID_INT,
                              f"expected a number at position {tok.span.start}, found '{tok.text}'", tok.span)
        self._advance()
        value = -tok.value if negative else tok.value
        return IntLiteral(value, span=first.span.merge(tok.span))

    def _parse_math_item(self) -> MathExpr:
        lparen = self._peek()
        postfix = self._parse_group(1, lparen.span, allow_placeholder=False)
        return MathExpr(postfix, span=lparen.span.merge(self._last().span))

    # --- arithmetic (shunting-yard) ---

    def _check_parens(self) -> None:
        """
        Pre-scan the remaining tokens for unbalanced parentheses.

        Reports the first excess ')' or, once the scan is exhausted, the
        first '(' left open.
        """
        if self._parens_checked:
            return
        open_parens: List[Token] = []
        for tok in self.tokens[self.index:]:
            if tok.kind is TokenKind.LPAREN:
                open_parens.append(tok)
            elif tok.kind is TokenKind.RPAREN:
                if not open_parens:
                    raise self._error(ParseErrorKind.UNMATCHED_PAREN,
                                      f"unmatched parenthesis at position {tok.span.start}", tok.span)
                open_parens.pop()
        if open_parens:
            tok = open_parens[0]
            raise self._error(ParseErrorKind.UNMATCHED_PAREN,
                              f"unmatched parenthesis at position {tok.span.start}", tok.span)
        self._parens_checked = True

    def _parse_group(self, depth: int, outer: Span, allow_placeholder: bool) -> List[Token]:
        self._check_parens()
        lparen = self._advance()
        if depth > MAX_PAREN_DEPTH:
            raise self._error(ParseErrorKind.TOO_MANY_PAREN,
                              f"too many nested parentheses (max {MAX_PAREN_DEPTH})", outer.merge(lparen.span))
        if self._check(TokenKind.RPAREN):
            rparen = self._advance()
            raise self._error(ParseErrorKind.EMPTY_PAREN,
                              f"empty math expression at position {lparen.span.start}",
                              lparen.span.merge(rparen.span))
        postfix = self._parse_expr(GROUP_STOP, depth, outer, allow_placeholder)
        if not self._check(TokenKind.RPAREN):
            raise self._error(ParseErrorKind.UNMATCHED_PAREN,
                              f"unmatched parenthesis at position {lparen.span.start}", lparen.span)
        self._advance()
        return postfix

    def _parse_expr(
            self,
            stop: FrozenSet[TokenKind],
            depth: int,
            outer: Optional[Span],
            allow_placeholder: bool,
            lead: Optional[Token] = None,
    ) -> List[Token]:
        """
        Reduce `operand (binop operand)*` to postfix order.

        Stops, without consuming it, at end of input or at a token whose
        kind is in `stop`. Parenthesized operands recurse one level deeper.
        `lead`, when given, is taken as the already-read first operand.
        """
        output: List[Token] = []
        operators: List[Token] = []
        expect_operand = True
        if lead is not None:
            output.append(lead)
            expect_operand = False

        while True:
            if expect_operand:
                signs = 0
                while self._check_sign():
                    sign = self._advance()
                    # prefix operators are right-associative: push without popping
                    operators.append(replace(sign, op=sign.op.as_unary()))
                    signs += 1
                tok = self._peek()
                if tok is None:
                    last = self._last()
                    kind = ParseErrorKind.INCOMPLETE_INT if signs and not output else \
                        ParseErrorKind.INCOMPLETE_MATH_EXPR
                    raise self._error(kind,
                                      f"expected a number after the math operator '{last.text}' "
                                      f"at position {last.span.start}", last.span)
                if tok.kind is TokenKind.INT:
                    output.append(self._advance())
                elif tok.kind is TokenKind.RANGE_MUTATION_ARG:
                    if not allow_placeholder:
                        raise self._error(ParseErrorKind.MISPLACED_PLACEHOLDER,
                                          f"'@' at position {tok.span.start} can only be used in a mutation",
                                          tok.span)
                    output.append(self._advance())
                elif tok.kind is TokenKind.LPAREN:
                    output.extend(self._parse_group(depth + 1, outer or tok.span, allow_placeholder))
                elif signs:
                    raise self._error(ParseErrorKind.INVALID_INT,
                                      f"expected a number at position {tok.span.start}, found '{tok.text}'",
                                      tok.span)
                elif tok.kind is TokenKind.OPERATOR:
                    raise self._error(ParseErrorKind.UNEXPECTED_MATH_OP,
                                      f"unexpected math operator '{tok.text}' at position {tok.span.start}",
                                      tok.span)
                else:
                    raise self._error(ParseErrorKind.INVALID_MATH_EXPR,
                                      f"expected a number or '(' at position {tok.span.start}, found '{tok.text}'",
                                      tok.span)
                expect_operand = False
                continue

            tok = self._peek()
            if tok is None or tok.kind in stop:
                break
            if tok.kind is not TokenKind.OPERATOR:
                raise self._error(ParseErrorKind.INVALID_MATH_OP,
                                  f"expected a math operator at position {tok.span.start}, found '{tok.text}'",
                                  tok.span)
            self._advance()
            op = tok.op
            while operators:
                top = operators[-1].op
                if top.precedence > op.precedence or (
                        top.precedence == op.precedence and not op.is_right_assoc):
                    output.append(operators.pop())
                else:
                    break
            operators.append(tok)
            expect_operand = True

        while operators:
            output.append(operators.pop())
        return output

    # --- ranges ---

    def _require_token(self, lbrace: Token) -> Token:
        tok = self._peek()
        if tok is None:
            raise self._error(ParseErrorKind.UNMATCHED_BRACE,
                              f"unmatched brace at position {lbrace.span.start}", lbrace.span)
        return tok

    def _is_signed_literal(self, stop: FrozenSet[TokenKind]) -> bool:
        offset = 0
        while True:
            tok = self._peek(offset)
            if tok is None or tok.kind is not TokenKind.OPERATOR or tok.op not in SIGN_OPS:
                break
            offset += 1
        tok = self._peek(offset)
        if tok is None or tok.kind is not TokenKind.INT:
            return False
        after = self._peek(offset + 1)
        return after is None or after.kind in stop

    def _parse_bound(self, stop: FrozenSet[TokenKind], lbrace: Token) -> Bound:
        first = self._require_token(lbrace)
        if self._is_signed_literal(stop):
            return self._parse_int()
        postfix = self._parse_expr(stop, 0, None, allow_placeholder=False)
        return MathExpr(postfix, span=first.span.merge(self._last().span))

    def _parse_mutation(self, marker: Token, lbrace: Token) -> MathExpr:
        first = self._require_token(lbrace)
        lead = None
        if first.kind is TokenKind.OPERATOR:
            # leading operator: the running position is the implicit left operand
            lead = Token(TokenKind.RANGE_MUTATION_ARG, "@", marker.span)
        postfix = self._parse_expr(RANGE_ARG_STOP, 0, None, allow_placeholder=True, lead=lead)
        return MathExpr(postfix, span=first.span.merge(self._last().span))

    def _parse_range(self) -> RangeExpr:
        # '{' bound ('..' | '..=') bound (',' ('s:' bound | 'm:' mutation))* '}'
        self._check_parens()
        lbrace = self._advance()
        start = self._parse_bound(RANGE_START_STOP, lbrace)

        range_op = self._require_token(lbrace)
        if range_op.kind not in RANGE_OPS:
            raise self._error(ParseErrorKind.MISSING_RANGE_OP,
                              f"expected '..' or '..=' at position {range_op.span.start}, found '{range_op.text}'",
                              range_op.span)
        self._advance()
        end = self._parse_bound(RANGE_ARG_STOP, lbrace)

        step: Optional[Bound] = None
        mutation: Optional[MathExpr] = None
        while True:
            tok = self._require_token(lbrace)
            if tok.kind is TokenKind.RBRACE:
                rbrace = self._advance()
                break
            comma = self._advance()
            marker = self._require_token(lbrace)
            if marker.kind in (TokenKind.COMMA, TokenKind.RBRACE):
                raise self._error(ParseErrorKind.UNEXPECTED_COMMA,
                                  f"unexpected comma at position {comma.span.start}", comma.span)
            if marker.kind is TokenKind.RANGE_STEP:
                if step is not None:
                    raise self._error(ParseErrorKind.DUPLICATE_RANGE_ARG,
                                      f"duplicate step argument at position {marker.span.start}", marker.span)
                self._advance()
                step = self._parse_bound(RANGE_ARG_STOP, lbrace)
            elif marker.kind is TokenKind.RANGE_MUTATION:
                if mutation is not None:
                    raise self._error(ParseErrorKind.DUPLICATE_RANGE_ARG,
                                      f"duplicate mutation argument at position {marker.span.start}", marker.span)
                self._advance()
                mutation = self._parse_mutation(marker, lbrace)
            else:
                raise self._error(ParseErrorKind.INVALID_RANGE_ARG,
                                  f"expected 's:' or 'm:' at position {marker.span.start}, found '{marker.text}'",
                                  marker.span)

        return RangeExpr(
            start,
            end,
            inclusive=range_op.kind is TokenKind.RANGE_INCLUSIVE,
            step=step,
            mutation=mutation,
            span=lbrace.span.merge(rbrace.span),
        )


def parse(source: str, tokens: List[Token]) -> List[Node]:
    return Parser(source, tokens).parse()
