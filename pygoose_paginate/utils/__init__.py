from pygoose_paginate.utils.exceptions import PaginateError, NotConnected
from pygoose_paginate.utils.pagination import PageResult, Paging, total_pages_for
from pygoose_paginate.utils.callbacks import deliver
from pygoose_paginate.utils.types import (
    DocumentData,
    DocumentStore,
    FilterSpec,
    QueryBuilder,
    SortSpec,
    DocumentId,
    PyObjectId,
    MAX_POPULATE_DEPTH,
)

__all__ = [
    "PaginateError",
    "NotConnected",
    "PageResult",
    "Paging",
    "total_pages_for",
    "deliver",
    "DocumentData",
    "DocumentStore",
    "FilterSpec",
    "QueryBuilder",
    "SortSpec",
    "DocumentId",
    "PyObjectId",
    "MAX_POPULATE_DEPTH",
]
