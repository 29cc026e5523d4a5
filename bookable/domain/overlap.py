"""
Interval overlap predicate shared by lunch and booking exclusion.

Intervals are half-open ``[start, end)``: two intervals that merely touch at
an endpoint do not overlap, so a slot ending exactly when a booking starts is
still free.
"""

from datetime import datetime
from typing import Iterable, Tuple


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Return True if ``[a_start, a_end)`` and ``[b_start, b_end)`` intersect."""
    return a_start < b_end and b_start < a_end


def overlaps_any(
    start: datetime,
    end: datetime,
    intervals: Iterable[Tuple[datetime, datetime]]
) -> bool:
    """Return True if ``[start, end)`` overlaps any of the given intervals."""
    return any(
        overlaps(start, end, other_start, other_end)
        for other_start, other_end in intervals
    )
