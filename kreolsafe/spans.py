"""
Span Mapper — canonical match ranges back to raw offsets.
"""

from __future__ import annotations

from typing import Sequence


def _clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def to_raw_span(
    canonical_start: int,
    canonical_end: int,
    index_map: Sequence[int],
) -> tuple[int, int]:
    """Map a canonical ``[start, end)`` range to a raw ``[start, end)`` range.

    The raw end is one past the raw origin of the LAST matched canonical
    character. Raw characters dropped by repeat truncation after that
    point are not included.
    """
    if not index_map:
        return 0, 0

    last = len(index_map) - 1
    if canonical_start >= canonical_end:
        origin = index_map[_clamp(canonical_start, 0, last)]
        return origin, origin

    raw_start = index_map[_clamp(canonical_start, 0, last)]
    raw_end = index_map[_clamp(canonical_end - 1, 0, last)] + 1
    return raw_start, raw_end
