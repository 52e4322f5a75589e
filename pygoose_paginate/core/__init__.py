from pygoose_paginate.core.document import Document, _document_registry
from pygoose_paginate.core.queryset import QuerySet
from pygoose_paginate.core.reference import Ref, PopulateEngine
from pygoose_paginate.core.connection import connect, disconnect, get_database, get_client
from pygoose_paginate.core.options import PageOptions, PagePlan
from pygoose_paginate.core.paginator import Paginator

__all__ = [
    "Document",
    "QuerySet",
    "Ref",
    "PopulateEngine",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    "PageOptions",
    "PagePlan",
    "Paginator",
    "_document_registry",
]
