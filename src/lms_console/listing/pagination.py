from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageResult(Generic[T]):
    items: list[T]
    total_count: int
    current_page: int
    total_pages: int
    page_size: int
    statistics: dict[str, Any] = field(default_factory=dict)

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    def render(self) -> dict[str, Any]:
        return {
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "total_count": self.total_count,
            "page_size": self.page_size,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
        }


def total_pages(total_count: int, page_size: int) -> int:
    """Empty collections still have one (empty) page."""
    if page_size <= 0:
        raise ValueError(f"page_size must be > 0, got {page_size}")
    if total_count <= 0:
        return 1
    return math.ceil(total_count / page_size)


def clamp_page(page: int, pages: int) -> int:
    return min(max(1, page), max(1, pages))


def paginate(items: Sequence[T], page: int, page_size: int, statistics: dict[str, Any] | None = None) -> PageResult[T]:
    pages = total_pages(len(items), page_size)
    current = clamp_page(page, pages)
    start = (current - 1) * page_size
    return PageResult(
        items=list(items[start : start + page_size]),
        total_count=len(items),
        current_page=current,
        total_pages=pages,
        page_size=page_size,
        statistics=dict(statistics or {}),
    )
