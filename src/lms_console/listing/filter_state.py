from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..models import SortOrder
from .resources import ResourceSpec

SEARCH_FIELD = "search"
NO_CONSTRAINT = ("", "all")


@dataclass
class FilterState:
    search_term: str = ""
    category_filters: dict[str, str] = field(default_factory=dict)
    sort_field: str | None = None
    sort_direction: SortOrder = SortOrder.ASC
    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {self.page_size}")
        self.page = max(1, self.page)
        self.sort_direction = normalize_direction(self.sort_direction)

    def active_filters(self) -> dict[str, str]:
        return clean_filters(self.category_filters)


def normalize_direction(direction: SortOrder | str | None) -> SortOrder:
    return SortOrder.DESC if str(getattr(direction, "value", direction) or "").lower() == "desc" else SortOrder.ASC


def is_active(value: Any) -> bool:
    return value is not None and value not in NO_CONSTRAINT


def clean_filters(filters: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if is_active(value)}


def default_filter_state(resource: ResourceSpec, page_size: int = 20) -> FilterState:
    return FilterState(
        search_term="",
        category_filters=dict(resource.category_filters),
        sort_field=resource.default_sort,
        sort_direction=resource.default_direction,
        page=1,
        page_size=page_size,
    )


def set_filter(state: FilterState, field_name: str, value: str) -> FilterState:
    if field_name == SEARCH_FIELD:
        state.search_term = value
    else:
        state.category_filters[field_name] = value
    state.page = 1
    return state


def set_sort(state: FilterState, field_name: str, direction: SortOrder | str = SortOrder.ASC) -> FilterState:
    state.sort_field = field_name
    state.sort_direction = normalize_direction(direction)
    state.page = 1
    return state


def goto_page(state: FilterState, page: int) -> FilterState:
    state.page = max(1, page)
    return state


def build_query(state: FilterState, *, search_param: str = "search", paged: bool = True) -> dict[str, Any]:
    """Query parameters for a fetch; blank and "all" values are left out."""
    params: dict[str, Any] = {}
    if paged:
        params["page"] = state.page
        params["limit"] = state.page_size
    if state.sort_field:
        params["sortBy"] = state.sort_field
        params["sortOrder"] = state.sort_direction.value
    if is_active(state.search_term):
        params[search_param] = state.search_term
    params.update(state.active_filters())
    return params
