"""In-memory stand-in for a document store, recording what it is asked."""

import asyncio
from types import SimpleNamespace

from bson import ObjectId


class FakeQuery:
    def __init__(self, store, filter):
        self._store = store
        self.filter = filter
        self.calls = []
        self._skip = 0
        self._limit = 0
        self._lean = False

    def select(self, projection):
        self.calls.append(("select", projection))
        return self

    def sort(self, spec):
        self.calls.append(("sort", spec))
        return self

    def skip(self, n):
        self.calls.append(("skip", n))
        self._skip = n
        return self

    def limit(self, n):
        self.calls.append(("limit", n))
        self._limit = n
        return self

    def lean(self, enabled=True):
        self.calls.append(("lean", enabled))
        self._lean = enabled
        return self

    def populate(self, spec):
        self.calls.append(("populate", spec))
        return self

    async def exec(self):
        self._store.exec_calls += 1
        if self._store.find_error is not None:
            raise self._store.find_error
        if self._store.fetch_gate is not None:
            await self._store.fetch_gate()
        docs = self._store.matching(self.filter)[self._skip:]
        if self._limit:
            docs = docs[: self._limit]
        if self._lean:
            return [dict(doc) for doc in docs]
        return [SimpleNamespace(**doc) for doc in docs]


class FakeStore:
    """Collection of dicts with ``count`` and ``find`` like a Document class."""

    __name__ = "FakeStore"

    def __init__(self, n=0, **fields):
        self.docs = [
            {"_id": ObjectId(), "title": f"Book #{i}", **fields} for i in range(1, n + 1)
        ]
        self.queries = []
        self.count_calls = 0
        self.exec_calls = 0
        self.count_error = None
        self.find_error = None
        self.count_gate = None
        self.fetch_gate = None

    def matching(self, filter):
        return [d for d in self.docs if all(d.get(k) == v for k, v in filter.items())]

    async def count(self, filter=None):
        self.count_calls += 1
        if self.count_error is not None:
            raise self.count_error
        if self.count_gate is not None:
            await self.count_gate()
        return len(self.matching(filter or {}))

    def find(self, filter=None):
        query = FakeQuery(self, filter or {})
        self.queries.append(query)
        return query


def crossed_gates(store):
    """Make count and fetch each wait for the other to start.

    A paginator that awaits one before issuing the other deadlocks.
    """
    count_started = asyncio.Event()
    fetch_started = asyncio.Event()

    async def count_gate():
        count_started.set()
        await fetch_started.wait()

    async def fetch_gate():
        fetch_started.set()
        await count_started.wait()

    store.count_gate = count_gate
    store.fetch_gate = fetch_gate
