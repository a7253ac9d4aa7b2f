"""
Overlap Detection

Single definition of a scheduling conflict. Intervals are half-open, so an
appointment ending exactly when another starts does not conflict.
"""
from typing import Iterable, List, Tuple, TypeVar

T = TypeVar("T")


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """
    Check whether [a_start, a_end) and [b_start, b_end) intersect.

    Works for any mutually comparable values (time, datetime, minutes).
    """
    return a_start < b_end and a_end > b_start


def find_overlapping(start, end, intervals: Iterable[Tuple[T, T]]) -> List[Tuple[T, T]]:
    """Return the intervals that overlap [start, end)"""
    return [
        (other_start, other_end)
        for other_start, other_end in intervals
        if overlaps(start, end, other_start, other_end)
    ]
