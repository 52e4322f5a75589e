import pytest

from fakes import FakeStore
from pygoose_paginate import PageResult, Paginator
from pygoose_paginate.utils.callbacks import deliver


class TestDeliver:
    async def test_success_is_error_first(self):
        calls = []
        returned = await deliver(Paginator(FakeStore(3)).paginate(), lambda err, res: calls.append((err, res)))
        assert returned is None
        assert len(calls) == 1
        err, result = calls[0]
        assert err is None
        assert isinstance(result, PageResult)
        assert result.paging.total_items == 3

    async def test_failure_goes_to_callback(self):
        store = FakeStore(3)
        store.count_error = ConnectionError("down")
        calls = []
        await deliver(Paginator(store).paginate(), lambda err, res: calls.append((err, res)))
        assert len(calls) == 1
        assert isinstance(calls[0][0], ConnectionError)
        assert calls[0][1] is None

    async def test_callback_error_not_reported_twice(self):
        calls = []

        def callback(err, res):
            calls.append(err)
            raise KeyError("boom")

        with pytest.raises(KeyError):
            await deliver(Paginator(FakeStore(1)).paginate(), callback)
        assert calls == [None]

    async def test_async_callback_awaited(self):
        seen = []

        async def callback(err, res):
            seen.append(res.paging.total_items)

        await deliver(Paginator(FakeStore(6)).paginate(), callback)
        assert seen == [6]
