from __future__ import annotations

from typing import Any, Mapping

from pygoose_paginate.core.options import PageOptions
from pygoose_paginate.core.paginator import Paginator
from pygoose_paginate.utils.callbacks import Callback, deliver
from pygoose_paginate.utils.pagination import PageResult
from pygoose_paginate.utils.settings import SettingsResolver
from pygoose_paginate.utils.types import FilterSpec


class PaginateMixin:
    """Mixin that adds ``paginate()`` to a Document class.

    Usage: class Book(PaginateMixin, Document): ...

    Defaults for every call can be set on the model:

        class Settings:
            paginate_defaults = {"limit": 20, "lean": True}
    """

    @classmethod
    def paginator(cls) -> Paginator:
        """Build a Paginator over this class with the current model defaults."""
        return Paginator(cls, defaults=SettingsResolver.get_paginate_defaults(cls))

    @classmethod
    async def paginate(
        cls,
        filter: FilterSpec | None = None,
        options: PageOptions | Mapping[str, Any] | None = None,
        callback: Callback | None = None,
    ) -> PageResult | None:
        """Return a page of documents matching ``filter``.

        With a ``callback`` the outcome is passed as ``callback(err, result)``
        and nothing is returned.

        Examples:
            page = await Book.paginate({"author": author.id}, {"page": 2, "limit": 20})
            page = await Book.paginate(options={"offset": 30, "lean": True})
        """
        pending = cls.paginator().paginate(filter, options)
        if callback is None:
            return await pending
        await deliver(pending, callback)
        return None
