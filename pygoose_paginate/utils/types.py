from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, Union

from bson import ObjectId
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

# Type aliases for better clarity
DocumentData = dict[str, Any]
FilterSpec = dict[str, Any]
SortSpec = list[tuple[str, int]]
ProjectionSpec = dict[str, int]
PopulateSpec = Union[str, Mapping[str, Any]]
DocumentId = ObjectId | str


# Maximum depth for nested population
MAX_POPULATE_DEPTH = 5


class QueryBuilder(Protocol):
    """Chainable fetch query exposed by a document store."""

    def select(self, projection: Any) -> QueryBuilder: ...

    def sort(self, spec: Any) -> QueryBuilder: ...

    def skip(self, n: int) -> QueryBuilder: ...

    def limit(self, n: int) -> QueryBuilder: ...

    def lean(self, enabled: bool = True) -> QueryBuilder: ...

    def populate(self, spec: PopulateSpec) -> QueryBuilder: ...

    async def exec(self) -> list[Any]: ...


class DocumentStore(Protocol):
    """What the paginator needs from a collection: a count and a find."""

    async def count(self, filter: FilterSpec | None = None) -> int: ...

    def find(self, filter: FilterSpec | None = None) -> QueryBuilder: ...


def as_list(value: Any) -> list[Any]:
    """Wrap a single value in a list; pass sequences through as lists."""
    if value is None:
        return []
    if isinstance(value, (str, Mapping)) or not isinstance(value, Sequence):
        return [value]
    return list(value)


class PyObjectId(ObjectId):
    """ObjectId usable as a pydantic v2 field type.

    Validates from ``ObjectId`` or a 24-char hex string and serializes to
    its hex string.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.to_string_ser_schema(when_used="json"),
        )

    @staticmethod
    def coerce(value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Invalid ObjectId: {value!r}")
