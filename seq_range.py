#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2025-2026 gwz

from typing import Iterator, Optional


def range_stride(start: int, end: int, step: Optional[int] = None) -> int:
    """
    Signed distance between consecutive positions.

    The direction always follows start -> end (an ascending range when
    end >= start); an explicit step only contributes its magnitude.
    """
    magnitude = 1 if step is None else abs(step)
    if magnitude == 0:
        raise ValueError("range step must be non-zero")
    return magnitude if end >= start else -magnitude


def iter_range(start: int, end: int, inclusive: bool, step: Optional[int] = None) -> Iterator[int]:
    stride = range_stride(start, end, step)
    pos = start
    if stride > 0:
        while pos < end or (inclusive and pos == end):
            yield pos
            pos += stride
    else:
        while pos > end or (inclusive and pos == end):
            yield pos
            pos += stride

