"""Error-first callback delivery for coroutine results."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

T = TypeVar("T")

Callback = Callable[[BaseException | None, Any], Any]


async def deliver(awaitable: Awaitable[T], callback: Callback) -> None:
    """Await ``awaitable`` and hand the outcome to ``callback``.

    Success calls ``callback(None, result)``; failure calls
    ``callback(exc, None)``. Coroutine callbacks are awaited. Anything the
    callback raises propagates to the caller and is not fed back into the
    callback.
    """
    try:
        result = await awaitable
    except Exception as exc:
        outcome = callback(exc, None)
    else:
        outcome = callback(None, result)
    if asyncio.iscoroutine(outcome):
        await outcome
