#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from dataclasses import dataclass
from typing import Optional, Union

from seq_lexer import LexerError
from seq_parser import ParseError


DIAGNOSTIC_CODE_FAMILIES = {
    "LEX": [
        "LEX-0010",
        "LEX-0020",
        "LEX-0030",
        "LEX-0031",
        "LEX-0040",
        "LEX-0041",
        "LEX-0050",
    ],
    "PAR": [
        "PAR-0010",
        "PAR-0020",
        "PAR-0030",
        "PAR-0031",
        "PAR-0040",
        "PAR-0050",
        "PAR-0051",
        "PAR-0052",
        "PAR-0060",
        "PAR-0061",
        "PAR-0070",
        "PAR-0071",
        "PAR-0072",
        "PAR-0073",
        "PAR-0074",
        # arithmetic and range evaluation
        "PAR-0100",
        "PAR-0101",
        "PAR-0102",
        "PAR-0110",
        "PAR-0111",
    ],
    # ICE codes are internal errors raised as exceptions,
    # not user-facing diagnostics; they are excluded from this registry.
}


@dataclass
class Diagnostic:
    kind: str  # "error" or "warning"
    message: str
    origin: Optional[str] = None  # input name, e.g. "<input>" or "<stdin>"
    code: Optional[str] = None

    # 1-indexed, inclusive character range
    start: Optional[int] = None
    end: Optional[int] = None

    # full input text, for snippets
    source: Optional[str] = None

    # Return the one-line header; snippets will be printed at the call site
    def format(self) -> str:
        loc = ""
        if self.origin is not None:
            loc += self.origin
        if self.start is not None:
            loc += f":{self.start}"
        if loc:
            loc += ": "
        return f"{loc}{self.kind}: {self.message}"


def diag_from_error(err: Union[LexerError, ParseError], origin: Optional[str] = "<input>") -> Diagnostic:
    start = end = None
    if err.span is not None:
        start = err.span.start
        end = err.span.end
    return Diagnostic(
        kind="error",
        message=err.message,
        origin=origin,
        code=err.code,
        start=start,
        end=end,
        source=err.source,
    )
