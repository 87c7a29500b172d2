"""Pure filter/sort step for views that narrow a fully fetched collection locally."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from functools import cmp_to_key
from typing import Any, Sequence, TypeVar

from ..models import SortOrder, field_value
from .filter_state import FilterState, is_active

T = TypeVar("T")


def apply_local_derivation(
    items: Sequence[T],
    state: FilterState,
    searchable_fields: Sequence[str] = ("title",),
) -> list[T]:
    rows = list(items)
    term = state.search_term.strip().lower()
    if term:
        rows = [row for row in rows if matches_search(row, term, searchable_fields)]
    for name, selected in state.category_filters.items():
        if is_active(selected):
            rows = [row for row in rows if matches_category(field_value(row, name), selected)]
    if state.sort_field:
        rows = sort_items(rows, state.sort_field, state.sort_direction)
    return rows


def matches_search(row: Any, term: str, searchable_fields: Sequence[str]) -> bool:
    for name in searchable_fields:
        value = field_value(row, name)
        if isinstance(value, str) and term in value.lower():
            return True
    return False


def matches_category(value: Any, selected: Any) -> bool:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return str(selected).strip().lower() == ("true" if value else "false")
    if value is None:
        return False
    if isinstance(value, (int, float)) and not isinstance(selected, (int, float)):
        return str(value) == str(selected).strip()
    if hasattr(value, "id") and not isinstance(selected, type(value)):
        # populated references are filtered by their id
        return str(getattr(value, "id")) == str(selected)
    return value == selected


def sort_items(rows: list[T], sort_field: str, direction: SortOrder) -> list[T]:
    descending = direction == SortOrder.DESC

    def _compare(left: T, right: T) -> int:
        a = field_value(left, sort_field)
        b = field_value(right, sort_field)
        if a is None and b is None:
            return 0
        # missing values sink to the end in both directions
        if a is None:
            return 1
        if b is None:
            return -1
        result = compare_values(a, b)
        return -result if descending else result

    return sorted(rows, key=cmp_to_key(_compare))


def compare_values(a: Any, b: Any) -> int:
    a_rank, a_key = _sort_key(a)
    b_rank, b_key = _sort_key(b)
    if a_rank != b_rank:
        return -1 if a_rank < b_rank else 1
    if a_key < b_key:
        return -1
    if a_key > b_key:
        return 1
    return 0


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return 0, int(value)
    if isinstance(value, (int, float)):
        return 0, value
    if isinstance(value, datetime):
        return 1, value.timestamp()
    if isinstance(value, date):
        return 1, datetime(value.year, value.month, value.day).timestamp()
    return 2, str(value).lower()
