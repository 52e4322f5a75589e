"""Tracing for store reads and paginate calls.

Off by default. When enabled, every ``count``/``find``/``populate`` read and
every ``paginate`` call produces a ``QueryEvent``; paginate events also carry
the skip, limit and positioning mode that were resolved for the call.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable

logger = logging.getLogger("pygoose_paginate")

Listener = Callable[["QueryEvent"], Any]


@dataclass(frozen=True)
class QueryEvent:
    operation: str
    collection: str
    document_class: str = ""
    filter: dict[str, Any] | None = None
    duration_ms: float = 0.0
    result_count: int | None = None
    skip: int | None = None
    limit: int | None = None
    mode: str | None = None
    # exception class name when the operation failed
    error: str | None = None


@dataclass
class Tracer:
    """Holds tracing switches, listeners and (optionally) captured events."""

    enabled: bool = False
    slow_query_ms: float = 100.0
    capture: bool = False
    listeners: list[Listener] = field(default_factory=list)
    events: list[QueryEvent] = field(default_factory=list)

    def record(self, event: QueryEvent) -> None:
        if self.capture:
            self.events.append(event)
        if event.duration_ms > self.slow_query_ms:
            logger.warning(
                "Slow %s on %s: %.1fms (threshold %.1fms, skip=%s, limit=%s)",
                event.operation,
                event.collection,
                event.duration_ms,
                self.slow_query_ms,
                event.skip,
                event.limit,
            )
        for listener in self.listeners:
            listener(event)


_tracer = Tracer()


def enable_tracing(slow_query_ms: float = 100.0, capture_events: bool = False) -> None:
    """Start emitting events; log operations slower than ``slow_query_ms``."""
    _tracer.enabled = True
    _tracer.slow_query_ms = slow_query_ms
    _tracer.capture = capture_events


def disable_tracing() -> None:
    """Stop tracing and forget listeners and captured events."""
    global _tracer
    _tracer = Tracer()


def get_events() -> list[QueryEvent]:
    return list(_tracer.events)


def clear_events() -> None:
    _tracer.events.clear()


def add_listener(callback: Listener) -> None:
    _tracer.listeners.append(callback)


def remove_listener(callback: Listener) -> None:
    _tracer.listeners.remove(callback)


@asynccontextmanager
async def track_query(
    operation: str,
    collection: str,
    document_class: str = "",
    filter: dict[str, Any] | None = None,
    **paging: Any,
) -> AsyncIterator[dict[str, Any]]:
    """Time the wrapped block and record it as a QueryEvent.

    The block reports ``result_count`` through the yielded dict. Extra
    keyword arguments (``skip``, ``limit``, ``mode``) land on the event.
    A failure is recorded with its exception name and re-raised.
    """
    ctx: dict[str, Any] = {"result_count": None}
    if not _tracer.enabled:
        yield ctx
        return

    tracer = _tracer
    start = time.perf_counter()
    error = None
    try:
        yield ctx
    except Exception as exc:
        error = type(exc).__name__
        raise
    finally:
        tracer.record(
            QueryEvent(
                operation=operation,
                collection=collection,
                document_class=document_class,
                filter=filter,
                duration_ms=(time.perf_counter() - start) * 1000,
                result_count=ctx["result_count"],
                error=error,
                **paging,
            )
        )
