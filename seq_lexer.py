#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from seq_ast import Span


# ==========================
# Tokens and lexer
# ==========================

I64_MAX = 2 ** 63 - 1
I64_MIN = -2 ** 63


class TokenKind(Enum):
    COMMA = auto()  # ,
    INT = auto()  # integer literal, e.g. 42, 1_000, etc.
    OPERATOR = auto()  # + - * / ^ %

    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }

    # Range syntax
    RANGE_EXCLUSIVE = auto()  # ..
    RANGE_INCLUSIVE = auto()  # ..=
    RANGE_STEP = auto()  # s:
    RANGE_MUTATION = auto()  # m:
    RANGE_MUTATION_ARG = auto()  # @


class Op(Enum):
    ADD = auto()
    SUB = auto()
    MUL = auto()
    DIV = auto()
    POW = auto()
    MOD = auto()
    UNARY_ADD = auto()
    UNARY_SUB = auto()

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]

    @property
    def is_unary(self) -> bool:
        return self in (Op.UNARY_ADD, Op.UNARY_SUB)

    @property
    def is_right_assoc(self) -> bool:
        return self.is_unary

    def as_unary(self) -> "Op":
        if self is Op.ADD:
            return Op.UNARY_ADD
        if self is Op.SUB:
            return Op.UNARY_SUB
        raise ValueError(f"{self.name} has no unary form")


_PRECEDENCE = {
    Op.ADD: 1,
    Op.SUB: 1,
    Op.MUL: 2,
    Op.DIV: 2,
    Op.MOD: 2,
    Op.POW: 3,
    Op.UNARY_ADD: 4,
    Op.UNARY_SUB: 4,
}

OPERATORS = {
    "+": Op.ADD,
    "-": Op.SUB,
    "*": Op.MUL,
    "/": Op.DIV,
    "^": Op.POW,
    "%": Op.MOD,
}

DELIMITERS = {
    ",": TokenKind.COMMA,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    span: Span
    value: Optional[int] = None  # INT only
    op: Optional[Op] = None  # OPERATOR only

    def __repr__(self) -> str:
        return f"{self.text!r}"


class LexErrorKind(Enum):
    INVALID_TOKEN = "LEX-0010"
    MISSING_COLON = "LEX-0020"
    INVALID_RANGE = "LEX-0030"
    UNEXPECTED_EQUAL = "LEX-0031"
    MALFORMED_NUMBER = "LEX-0040"
    NUMBER_TOO_LARGE = "LEX-0041"
    MISPLACED_RANGE_SYNTAX = "LEX-0050"


@dataclass
class LexerError(Exception):
    kind: LexErrorKind
    message: str
    source: str
    span: Span

    @property
    def code(self) -> str:
        return self.kind.value


class Lexer:
    def __init__(self, source: str) -> None:
        self.source = source
        self.length = len(source)
        self.index = 0
        # set on '{', cleared on '}'; gates 's:', 'm:' and '@'
        self.in_brace = False

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        return cls(source)

    # --- low-level char utilities ---

    def _at_end(self) -> bool:
        return self.index >= self.length

    def _peek(self) -> str:
        if self._at_end():
            return "\0"
        return self.source[self.index]

    def _advance(self) -> str:
        c = self._peek()
        if not self._at_end():
            self.index += 1
        return c

    def _error(self, kind: LexErrorKind, message: str, span: Span) -> LexerError:
        return LexerError(kind, f"[{kind.value}] {message}", self.source, span)

    # --- main API ---

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            self._skip_ws()
            if self._at_end():
                break
            tokens.append(self._next_token())
        return tokens

    def _next_token(self) -> Token:
        start = self.index + 1
        c = self._advance()
        here = Span(start, start)

        if c.isdigit():
            return self._read_number(c, start)

        if c == ".":
            return self._read_range_op(start)

        if c == "s" or c == "m":
            return self._read_range_marker(c, start)

        if c == "@":
            if not self.in_brace:
                raise self._error(
                    LexErrorKind.MISPLACED_RANGE_SYNTAX,
                    f"character '{c}' at position {start} can only be used when defining number ranges",
                    here,
                )
            return Token(TokenKind.RANGE_MUTATION_ARG, c, here)

        op = OPERATORS.get(c)
        if op is not None:
            return Token(TokenKind.OPERATOR, c, here, op=op)

        kind = DELIMITERS.get(c)
        if kind is not None:
            if kind is TokenKind.LBRACE:
                self.in_brace = True
            elif kind is TokenKind.RBRACE:
                self.in_brace = False
            return Token(kind, c, here)

        raise self._error(LexErrorKind.INVALID_TOKEN, f"invalid token {c!r} at position {start}", here)

    def _read_number(self, c: str, start: int) -> Token:
        chars = [c]
        while self._peek().isdigit() or self._peek() == "_":
            chars.append(self._advance())
        text = "".join(chars)
        span = Span(start, self.index)
        try:
            value = int(text.replace("_", ""))
        except ValueError:
            raise self._error(
                LexErrorKind.MALFORMED_NUMBER, f"malformed number {text!r} at position {start}-{self.index}", span
            ) from None
        if value > I64_MAX:
            raise self._error(
                LexErrorKind.NUMBER_TOO_LARGE,
                f"integer literal '{text}' exceeds 64-bit signed range",
                span,
            )
        return Token(TokenKind.INT, text, span, value=value)

    def _read_range_op(self, start: int) -> Token:
        dots = 1
        inclusive = False
        while self._peek() in (".", "="):
            pos = self.index + 1
            ch = self._advance()
            # '=' may only appear once, as the last character of the run
            if inclusive:
                raise self._error(LexErrorKind.UNEXPECTED_EQUAL,
                                  f"unexpected '=' in range syntax at position {start}-{pos}", Span(start, pos))
            if ch == "=":
                inclusive = True
            else:
                dots += 1
        span = Span(start, self.index)
        text = self.source[start - 1:self.index]
        if dots != 2:
            raise self._error(
                LexErrorKind.INVALID_RANGE, f"invalid range syntax {text!r} at position {start}-{self.index}", span
            )
        kind = TokenKind.RANGE_INCLUSIVE if inclusive else TokenKind.RANGE_EXCLUSIVE
        return Token(kind, text, span)

    def _read_range_marker(self, c: str, start: int) -> Token:
        if not self.in_brace:
            raise self._error(
                LexErrorKind.MISPLACED_RANGE_SYNTAX,
                f"character '{c}' at position {start} can only be used when defining number ranges",
                Span(start, start),
            )
        if self._peek() != ":":
            raise self._error(
                LexErrorKind.MISSING_COLON,
                f"expected a trailing ':' after '{c}' at position {start}",
                Span(start, start),
            )
        self._advance()  # consume ':'
        kind = TokenKind.RANGE_STEP if c == "s" else TokenKind.RANGE_MUTATION
        return Token(kind, c + ":", Span(start, start + 1))

    def _skip_ws(self) -> None:
        while not self._at_end() and self._peek().isspace():
            self._advance()


def lex(source: str) -> List[Token]:
    return Lexer.from_source(source).tokenize()
