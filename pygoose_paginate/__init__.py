from pygoose_paginate.core import (
    Document,
    QuerySet,
    Ref,
    PopulateEngine,
    connect,
    disconnect,
    get_database,
    get_client,
    PageOptions,
    Paginator,
)
from pygoose_paginate.lifecycle import (
    QueryEvent,
    add_listener,
    disable_tracing,
    enable_tracing,
)
from pygoose_paginate.plugins import PaginateMixin
from pygoose_paginate.utils import (
    PaginateError,
    NotConnected,
    PageResult,
    Paging,
    PyObjectId,
    deliver,
)

__all__ = [
    # Core
    "Document",
    "QuerySet",
    "Ref",
    "PopulateEngine",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    "PageOptions",
    "Paginator",
    # Lifecycle
    "QueryEvent",
    "add_listener",
    "disable_tracing",
    "enable_tracing",
    # Plugins
    "PaginateMixin",
    # Utils
    "PaginateError",
    "NotConnected",
    "PageResult",
    "Paging",
    "PyObjectId",
    "deliver",
]
