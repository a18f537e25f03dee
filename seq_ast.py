#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Union

if TYPE_CHECKING:
    from seq_lexer import Token


# ==========================
# AST definitions
# ==========================


@dataclass(frozen=True)
class Span:
    """1-indexed, inclusive character range into the original input."""
    start: int
    end: int

    def merge(self, other: "Span") -> "Span":
        return Span(self.start, other.end)

    def text(self, source: str) -> str:
        return source[self.start - 1:self.end]


@dataclass
class Node:
    span: Optional[Span] = field(default=None, repr=False, compare=False, kw_only=True)


@dataclass
class IntLiteral(Node):
    value: int


@dataclass
class MathExpr(Node):
    postfix: List["Token"]  # operands and operators in RPN order


Bound = Union[IntLiteral, MathExpr]


@dataclass
class RangeExpr(Node):
    start: Bound
    end: Bound
    inclusive: bool = False
    step: Optional[Bound] = None
    mutation: Optional[MathExpr] = None
