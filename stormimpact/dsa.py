"""
Sorting utilities
=================

Ranking needs a sort that is stable in *both* directions: when two events
have the same total, the one seen first in the source stays first. Python's
`sorted(..., reverse=True)` also keeps ties in order, but the merge below
makes the rule explicit and is what the aggregator uses.

Included:
- Merge Sort (stable ascending and descending, O(n log n))
- top_k: stable sort then truncate
"""

from __future__ import annotations
from typing import Callable, List, Sequence, TypeVar

T = TypeVar("T")


def merge_sort(arr: Sequence[T], key: Callable[[T], object] = lambda x: x, reverse: bool = False) -> List[T]:
    """Stable merge sort."""
    if len(arr) <= 1:
        return list(arr)
    mid = len(arr) // 2
    left = merge_sort(arr[:mid], key=key, reverse=reverse)
    right = merge_sort(arr[mid:], key=key, reverse=reverse)
    return _merge(left, right, key=key, reverse=reverse)


def _merge(left: List[T], right: List[T], key: Callable[[T], object], reverse: bool) -> List[T]:
    out: List[T] = []
    # i and j are pointers into each sorted list
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = key(left[i]), key(right[j])
        # on equal keys always take from the left half
        take_left = (a >= b) if reverse else (a <= b)
        if take_left:
            out.append(left[i]); i += 1
        else:
            out.append(right[j]); j += 1
    out.extend(left[i:])
    out.extend(right[j:])
    return out


def top_k(arr: Sequence[T], k: int, key: Callable[[T], object]) -> List[T]:
    """The k largest items by `key`, largest first, ties in input order."""
    if k < 0:
        raise ValueError("k must be >= 0")
    return merge_sort(arr, key=key, reverse=True)[:k]
