"""Comparator-based ordering of city rows by id."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable, List, Optional

from .state import CityRecord, Identifier, SortDirection


def _rank(value: Identifier) -> int:
    # Numbers sort ahead of strings when a dataset mixes id types.
    return 1 if isinstance(value, str) else 0


def compare_ids(left: Identifier, right: Identifier) -> int:
    """Three-way comparison of two ids in ascending order."""

    left_rank = _rank(left)
    right_rank = _rank(right)
    if left_rank != right_rank:
        return -1 if left_rank < right_rank else 1
    if left < right:  # type: ignore[operator]
        return -1
    if left > right:  # type: ignore[operator]
        return 1
    return 0


def sort_cities(records: Iterable[CityRecord], direction: SortDirection) -> List[CityRecord]:
    """Return ``records`` ordered by id; rows with equal ids keep their order."""

    polarity = -1 if direction is SortDirection.DESCENDING else 1

    def _compare(left: CityRecord, right: CityRecord) -> int:
        return polarity * compare_ids(left.id, right.id)

    return sorted(records, key=cmp_to_key(_compare))


def reverse_sort_direction(direction: SortDirection) -> SortDirection:
    if direction is SortDirection.DESCENDING:
        return SortDirection.ASCENDING
    return SortDirection.DESCENDING


def toggle_sort_direction(current: Optional[SortDirection]) -> SortDirection:
    """Direction after one click on the sortable header."""

    if current is None:
        return SortDirection.DESCENDING
    return reverse_sort_direction(current)


__all__ = ["compare_ids", "reverse_sort_direction", "sort_cities", "toggle_sort_direction"]
