#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

# seq_internal_error.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from seq_ast import Span


@dataclass(frozen=True)
class ICELocation:
    origin: Optional[str]
    span: Optional[Span]


class InternalSequenceError(RuntimeError):
    """
    ICE = generator bug / violated pipeline invariant.
    Not for user mistakes (those are Diagnostics).
    """

    def __init__(self, message: str, loc: ICELocation | None = None):
        super().__init__(message)
        self.message = message
        self.loc = loc

    def format(self) -> str:
        message = self.message
        if "[ICE-" not in message:
            message = f"[ICE-9999] {message}"
        if self.loc and self.loc.origin:
            if self.loc.span is not None:
                return f"{self.loc.origin}:{self.loc.span.start}: internal error: {message}"
            return f"{self.loc.origin}: internal error: {message}"
        return f"internal error: {message}"
