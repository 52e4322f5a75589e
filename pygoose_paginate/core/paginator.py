from __future__ import annotations

import asyncio
import logging
from typing import Any, Generic, Mapping, TypeVar

from pygoose_paginate.core.options import PageOptions, PagePlan
from pygoose_paginate.lifecycle.observability import track_query
from pygoose_paginate.utils.pagination import PageResult
from pygoose_paginate.utils.types import DocumentStore, FilterSpec

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Paginator(Generic[T]):
    """Runs paginated reads against a document store.

    Each call counts the matching documents and fetches one page of them
    concurrently, then combines both into a ``PageResult``. Store errors
    propagate unchanged; there is no partial result.

    Args:
        store: Anything with ``count(filter)`` and ``find(filter)``, such as
            a ``Document`` subclass.
        defaults: Options applied to every call that does not set them.
    """

    def __init__(
        self,
        store: DocumentStore,
        defaults: PageOptions | Mapping[str, Any] | None = None,
    ) -> None:
        self._store = store
        self.defaults = PageOptions.coerce(defaults)

    async def paginate(
        self,
        filter: FilterSpec | None = None,
        options: PageOptions | Mapping[str, Any] | None = None,
    ) -> PageResult[T]:
        """Return one page of documents matching ``filter``.

        ``offset`` wins over ``page`` when both are given; with neither the
        first page is returned. A ``limit`` of 0 skips the fetch entirely
        and only reports totals.
        """
        filter = filter or {}
        plan = PageOptions.coerce(options).merged_over(self.defaults).resolve()
        logger.debug(
            "Paginating %s (skip=%s, limit=%s, lean=%s)",
            self._store_name,
            plan.skip,
            plan.limit,
            plan.lean,
        )

        async with track_query(
            "paginate",
            self._collection_name,
            self._store_name,
            filter=filter,
            skip=plan.skip,
            limit=plan.limit,
            mode=plan.mode,
        ) as ctx:
            total, docs = await self._run_both(filter, plan)
            ctx["result_count"] = len(docs)

        return PageResult(data=docs, paging=plan.paging(total))

    async def _run_both(self, filter: FilterSpec, plan: PagePlan) -> tuple[int, list[T]]:
        """Count and fetch concurrently.

        The first failure cancels the other read and is raised as-is, not
        wrapped in an ExceptionGroup.
        """
        try:
            async with asyncio.TaskGroup() as group:
                count_task = group.create_task(self._store.count(filter))
                fetch_task = group.create_task(self._fetch(filter, plan))
        except ExceptionGroup as failed:
            raise failed.exceptions[0] from None
        return count_task.result(), fetch_task.result()

    async def _fetch(self, filter: FilterSpec, plan: PagePlan) -> list[T]:
        if plan.limit == 0:
            return []

        query = (
            self._store.find(filter)
            .select(plan.select)
            .sort(plan.sort)
            .skip(plan.skip)
            .limit(plan.limit)
            .lean(plan.lean)
        )
        for spec in plan.populate:
            query = query.populate(spec)

        docs = await query.exec()
        if plan.lean and plan.lean_with_id:
            for doc in docs:
                # a projection may exclude _id
                if doc.get("_id") is not None:
                    doc["id"] = str(doc["_id"])
        return docs

    @property
    def _store_name(self) -> str:
        return getattr(self._store, "__name__", type(self._store).__name__)

    @property
    def _collection_name(self) -> str:
        return getattr(self._store, "_collection_name", "") or self._store_name
