from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


def total_pages_for(total_items: int, limit: int) -> int | float:
    """Number of pages needed to show ``total_items`` at ``limit`` per page.

    A limit of 0 yields ``math.inf``. Otherwise the result never drops
    below 1, so an empty collection still has one (empty) page.
    """
    if limit == 0:
        return math.inf
    return math.ceil(total_items / limit) or 1


@dataclass(frozen=True)
class Paging:
    """Pagination metadata.

    Offset mode fills ``current_start_index``; page mode fills
    ``current_page`` and ``total_pages``. Never both.
    """

    total_items: int
    items_per_page: int
    current_start_index: int | None = None
    current_page: int | None = None
    total_pages: int | float | None = None

    @property
    def is_offset_mode(self) -> bool:
        return self.current_start_index is not None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "totalItems": self.total_items,
            "itemsPerPage": self.items_per_page,
        }
        if self.is_offset_mode:
            data["currentStartIndex"] = self.current_start_index
        else:
            data["currentPage"] = self.current_page
            data["totalPages"] = self.total_pages
        return data


@dataclass(frozen=True)
class PageResult(Generic[T]):
    """A page of documents plus its paging metadata."""

    data: list[T]
    paging: Paging

    def to_dict(self) -> dict[str, Any]:
        """Render the response shape, dumping model instances by alias."""
        items = [
            item.model_dump(by_alias=True) if hasattr(item, "model_dump") else item
            for item in self.data
        ]
        return {"data": items, "paging": self.paging.to_dict()}
