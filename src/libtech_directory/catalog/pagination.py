from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.total_items > 0 and self.page > 1

    @property
    def has_next(self) -> bool:
        return self.total_items > 0 and self.page < self.total_pages


def page_count(total_items: int, page_size: int) -> int:
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(1, page), total_pages)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """
    Slice `items` into the requested page, clamping the page into range.

    An empty list still has one (empty) page.
    """
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")

    total_pages = page_count(len(items), page_size)
    current = clamp_page(page, total_pages)
    offset = (current - 1) * page_size
    return Page(
        items=list(items[offset:offset + page_size]),
        page=current,
        page_size=page_size,
        total_items=len(items),
        total_pages=total_pages,
    )
