"""Paginate options and their resolution into a concrete fetch plan."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from pygoose_paginate.utils.pagination import Paging, total_pages_for
from pygoose_paginate.utils.types import PopulateSpec, as_list

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class PageOptions:
    """Options accepted by ``Paginator.paginate``.

    ``None`` means "not given" for every field, so a set of options can be
    layered over defaults key by key. Values are not validated here; the
    store driver reports anything it cannot run.
    """

    select: Any = None
    sort: Any = None
    populate: PopulateSpec | list[PopulateSpec] | None = None
    lean: bool | None = None
    lean_with_id: bool | None = None
    offset: int | None = None
    page: int | None = None
    limit: int | None = None

    @classmethod
    def coerce(cls, value: PageOptions | Mapping[str, Any] | None) -> PageOptions:
        """Accept an options instance, a plain mapping or None.

        Raises:
            TypeError: If a mapping carries an unknown option name.
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls(**value)

    def merged_over(self, defaults: PageOptions) -> PageOptions:
        """Return ``defaults`` with every option set here taking precedence."""
        overrides = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(defaults, **overrides)

    def resolve(self) -> PagePlan:
        limit = DEFAULT_LIMIT if self.limit is None else self.limit
        offset = page = None
        if self.offset is not None:
            offset = skip = self.offset
        elif self.page is not None:
            page = self.page
            skip = (page - 1) * limit
        else:
            page, skip = 1, 0

        return PagePlan(
            select=self.select,
            sort=self.sort,
            populate=as_list(self.populate),
            lean=bool(self.lean),
            lean_with_id=True if self.lean_with_id is None else bool(self.lean_with_id),
            limit=limit,
            skip=skip,
            offset=offset,
            page=page,
        )


@dataclass(frozen=True)
class PagePlan:
    """Fully resolved options for one paginate call.

    Exactly one of ``offset`` and ``page`` is set; it decides which paging
    fields the result carries.
    """

    select: Any
    sort: Any
    populate: list[PopulateSpec]
    lean: bool
    lean_with_id: bool
    limit: int
    skip: int
    offset: int | None = None
    page: int | None = None

    @property
    def mode(self) -> str:
        return "offset" if self.offset is not None else "page"

    def paging(self, total_items: int) -> Paging:
        if self.offset is not None:
            return Paging(
                total_items=total_items,
                items_per_page=self.limit,
                current_start_index=self.offset,
            )
        return Paging(
            total_items=total_items,
            items_per_page=self.limit,
            current_page=self.page,
            total_pages=total_pages_for(total_items, self.limit),
        )
