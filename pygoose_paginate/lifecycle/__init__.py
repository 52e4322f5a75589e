from pygoose_paginate.lifecycle.observability import (
    QueryEvent,
    add_listener,
    clear_events,
    disable_tracing,
    enable_tracing,
    get_events,
    remove_listener,
    track_query,
    Tracer,
)

__all__ = [
    "QueryEvent",
    "add_listener",
    "clear_events",
    "disable_tracing",
    "enable_tracing",
    "get_events",
    "remove_listener",
    "track_query",
    "Tracer",
]
