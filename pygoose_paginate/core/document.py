from __future__ import annotations

from typing import Any, ClassVar, Optional, Self, TYPE_CHECKING

from pydantic import BaseModel, Field
from pymongo.asynchronous.collection import AsyncCollection

from pygoose_paginate.core.connection import get_database
from pygoose_paginate.lifecycle.observability import track_query
from pygoose_paginate.utils.settings import SettingsResolver
from pygoose_paginate.utils.types import DocumentData, FilterSpec, PyObjectId

if TYPE_CHECKING:
    from pygoose_paginate.core.queryset import QuerySet

# Class name -> Document subclass, used to resolve Ref["Name"] targets
_document_registry: dict[str, type[Document]] = {}


class Document(BaseModel):
    """Base class for MongoDB-backed models.

    Binds each subclass to a collection and provides the reads the
    paginator relies on (``count`` and ``find``) plus inserts for seeding.

    Example:
        class Book(Document):
            title: str

            class Settings:
                collection = "books"
    """

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    # Set by __init_subclass__
    _collection_name: ClassVar[str] = ""
    _connection_alias: ClassVar[str] = "default"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._collection_name = SettingsResolver.get_collection_name(cls)
        cls._connection_alias = SettingsResolver.get_connection_alias(cls)
        _document_registry[cls.__name__] = cls

    # --- Serialization ---

    def _to_mongo(self) -> DocumentData:
        """Dump to a MongoDB-ready dict, keeping native ObjectIds."""
        data = self.model_dump(by_alias=True, mode="python")
        if data.get("_id") is None:
            data.pop("_id", None)
        return data

    @classmethod
    def _from_mongo(cls, data: DocumentData, partial: bool = False) -> Self:
        """Build an instance from a raw MongoDB document.

        ``partial`` is for projected reads: fields left out by the projection
        are not required, so the data is taken as-is without validation.
        """
        if partial:
            return cls.model_construct(**data)
        return cls.model_validate(data)

    # --- Collection access ---

    @classmethod
    def get_collection(cls) -> AsyncCollection:
        """Get the MongoDB collection for this document class."""
        return get_database(cls._connection_alias)[cls._collection_name]

    # --- Reads ---

    @classmethod
    def find(cls, filter: FilterSpec | None = None, **kwargs: Any) -> "QuerySet[Self]":
        """Return a QuerySet over documents matching ``filter`` and ``kwargs``."""
        from pygoose_paginate.core.queryset import QuerySet

        return QuerySet(cls, {**(filter or {}), **kwargs})

    @classmethod
    async def count(cls, filter: FilterSpec | None = None, **kwargs: Any) -> int:
        return await cls.find(filter, **kwargs).count()

    # --- Writes ---

    @classmethod
    async def create(cls, **kwargs: Any) -> Self:
        """Create and insert a new document."""
        doc = cls(**kwargs)
        await doc.insert()
        return doc

    @classmethod
    async def insert_many(cls, docs: list[Self]) -> list[Self]:
        """Insert several documents in one round trip, preserving order."""
        if not docs:
            return docs
        async with track_query("insert_many", cls._collection_name, cls.__name__) as ctx:
            result = await cls.get_collection().insert_many([d._to_mongo() for d in docs])
            for doc, inserted_id in zip(docs, result.inserted_ids):
                doc.id = inserted_id
            ctx["result_count"] = len(result.inserted_ids)
        return docs

    async def insert(self) -> None:
        """Insert this document into the database."""
        async with track_query("insert", self._collection_name, self.__class__.__name__):
            result = await self.get_collection().insert_one(self._to_mongo())
            self.id = result.inserted_id
