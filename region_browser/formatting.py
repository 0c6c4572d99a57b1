"""Formatting helpers for table cells and headers."""

from __future__ import annotations

from typing import Optional

from .state import SortDirection

_ARROWS = {
    SortDirection.DESCENDING: "↓",
    SortDirection.ASCENDING: "↑",
}


def format_population(value: object, *, default: str = "--") -> str:
    """Return ``value`` with thousands separators (e.g. ``4,000,000``)."""

    if value is None or isinstance(value, bool):
        return default
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if numeric.is_integer():
        return f"{int(numeric):,}"
    return f"{numeric:,.1f}"


def sort_indicator(direction: Optional[SortDirection]) -> str:
    if direction is None:
        return ""
    return _ARROWS[direction]


def header_label(title: str, direction: Optional[SortDirection]) -> str:
    indicator = sort_indicator(direction)
    return f"{title} {indicator}" if indicator else title


__all__ = ["format_population", "header_label", "sort_indicator"]
