from __future__ import annotations

from typing import Any, Generic, Iterable, Mapping, TypeVar

from pymongo import ASCENDING, DESCENDING

from pygoose_paginate.lifecycle.observability import track_query
from pygoose_paginate.utils.types import FilterSpec, PopulateSpec, ProjectionSpec, SortSpec

T = TypeVar("T")

_DIRECTIONS = {
    1: ASCENDING,
    -1: DESCENDING,
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
}


def _parse_field(token: str, negative: Any, positive: Any) -> tuple[str, Any]:
    if token.startswith("-"):
        return token[1:], negative
    return token.lstrip("+"), positive


def normalize_sort(*specs: Any) -> SortSpec:
    """Build a pymongo sort list from mongoose-style specs.

    Accepts ``"-date title"``, ``{"date": -1}`` or ``[("date", -1)]``.
    Direction values may also be ``"asc"``/``"desc"``.
    """
    sort_spec: SortSpec = []
    for spec in specs:
        if spec is None:
            continue
        if isinstance(spec, str):
            items: Iterable[Any] = spec.split()
        elif isinstance(spec, Mapping):
            items = spec.items()
        else:
            items = spec
        for item in items:
            if isinstance(item, str):
                sort_spec.append(_parse_field(item, DESCENDING, ASCENDING))
                continue
            field, direction = item
            key = direction.lower() if isinstance(direction, str) else direction
            if key not in _DIRECTIONS:
                raise ValueError(f"Invalid sort direction for '{field}': {direction!r}")
            sort_spec.append((field, _DIRECTIONS[key]))
    return sort_spec


def normalize_projection(*specs: Any) -> ProjectionSpec | None:
    """Build a pymongo projection from mongoose-style specs.

    Accepts ``"title -date"``, ``["title", "author"]`` or ``{"title": 1}``.
    Returns None when nothing was selected.
    """
    projection: ProjectionSpec = {}
    for spec in specs:
        if spec is None:
            continue
        if isinstance(spec, Mapping):
            projection.update(spec)
            continue
        names = spec.split() if isinstance(spec, str) else spec
        for name in names:
            field, flag = _parse_field(name, 0, 1)
            projection[field] = flag
    return projection or None


class QuerySet(Generic[T]):
    """Fluent, lazy, immutable query builder for MongoDB documents.

    Each chainable method returns a new QuerySet instance.
    Queries are only executed when a terminal method is called.
    """

    def __init__(
        self,
        document_class: type[T],
        filter: FilterSpec | None = None,
        sort: SortSpec | None = None,
        skip_count: int = 0,
        limit_count: int = 0,
        projection: ProjectionSpec | None = None,
        populate_specs: list[PopulateSpec] | None = None,
        lean: bool = False,
    ) -> None:
        self._document_class = document_class
        self._filter: FilterSpec = filter or {}
        self._sort: SortSpec = sort or []
        self._skip_count = skip_count
        self._limit_count = limit_count
        self._projection = projection
        self._populate_specs: list[PopulateSpec] = populate_specs or []
        self._lean = lean

    def _clone(self, **overrides: Any) -> QuerySet[T]:
        state = {
            "document_class": self._document_class,
            "filter": dict(self._filter),
            "sort": list(self._sort),
            "skip_count": self._skip_count,
            "limit_count": self._limit_count,
            "projection": dict(self._projection) if self._projection else None,
            "populate_specs": list(self._populate_specs),
            "lean": self._lean,
        }
        state.update(overrides)
        return QuerySet(**state)

    # --- Chainable methods ---

    def select(self, *specs: Any) -> QuerySet[T]:
        """Set the field projection. ``None`` leaves the projection unset."""
        return self._clone(projection=normalize_projection(*specs))

    def sort(self, *specs: Any) -> QuerySet[T]:
        """Set sort order. Prefix string fields with '-' for descending.

        Example: .sort("-created_at name") or .sort({"created_at": -1})
        """
        return self._clone(sort=normalize_sort(*specs))

    def skip(self, n: int) -> QuerySet[T]:
        return self._clone(skip_count=n)

    def limit(self, n: int) -> QuerySet[T]:
        """Cap the number of results. 0 means no limit, as in pymongo."""
        return self._clone(limit_count=n)

    def lean(self, enabled: bool = True) -> QuerySet[T]:
        """Return raw dicts instead of Document instances."""
        return self._clone(lean=bool(enabled))

    def populate(self, *specs: PopulateSpec) -> QuerySet[T]:
        """Queue reference paths to resolve after the query runs.

        A spec is a field name (``"author"``, ``"author.company"``) or a dict
        ``{"path": "author", "select": "name"}``. Specs run in call order.
        """
        return self._clone(populate_specs=self._populate_specs + list(specs))

    # --- Terminal methods ---

    async def exec(self) -> list[Any]:
        """Run the query and return documents, or dicts when lean."""
        doc_cls = self._document_class
        partial = self._projection is not None
        async with track_query("find", doc_cls._collection_name, doc_cls.__name__, filter=self._filter) as ctx:
            results: list[Any] = []
            async for raw in self._build_cursor():
                results.append(raw if self._lean else doc_cls._from_mongo(raw, partial=partial))
            ctx["result_count"] = len(results)

        if self._populate_specs and results:
            from pygoose_paginate.core.reference import PopulateEngine

            engine = PopulateEngine(lean=self._lean)
            for spec in self._populate_specs:
                await engine.populate(results, spec, doc_cls)

        return results

    async def count(self) -> int:
        """Count matching documents, ignoring skip and limit."""
        doc_cls = self._document_class
        async with track_query("count", doc_cls._collection_name, doc_cls.__name__, filter=self._filter) as ctx:
            result = await doc_cls.get_collection().count_documents(self._filter)
            ctx["result_count"] = result
        return result

    # --- Internal ---

    def _build_cursor(self):
        """Compose a pymongo cursor from stored query parameters."""
        collection = self._document_class.get_collection()
        cursor = collection.find(self._filter, self._projection)
        if self._sort:
            cursor = cursor.sort(self._sort)
        if self._skip_count:
            cursor = cursor.skip(self._skip_count)
        if self._limit_count:
            cursor = cursor.limit(self._limit_count)
        return cursor
