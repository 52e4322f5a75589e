from __future__ import annotations

from typing import Any, Generic, Mapping, TypeVar, get_args

from bson import ObjectId
from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from pygoose_paginate.lifecycle.observability import track_query
from pygoose_paginate.utils.types import MAX_POPULATE_DEPTH, PopulateSpec, ProjectionSpec

T = TypeVar("T")


class Ref(Generic[T]):
    """Reference to another Document.

    Holds an ObjectId until populated, then the target Document instance.
    Stored in MongoDB as the ObjectId and rendered as a string in JSON.
    """

    def __class_getitem__(cls, item: Any) -> Any:
        # Ref["Author"] and Ref[Author] both record the target for populate
        name = item if isinstance(item, str) else item.__name__
        return type(f"Ref[{name}]", (Ref,), {"__ref_target__": item})

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        return core_schema.no_info_plain_validator_function(
            _validate_ref,
            serialization=core_schema.plain_serializer_function_ser_schema(
                _serialize_ref,
                info_arg=True,
                when_used="unless-none",
            ),
        )


def _validate_ref(value: Any) -> Any:
    from pygoose_paginate.core.document import Document

    if value is None or isinstance(value, (ObjectId, Document)):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Cannot convert {value!r} to a reference")


def _serialize_ref(value: Any, info: Any) -> Any:
    # python mode keeps ObjectId for _to_mongo; json mode needs strings
    mode = getattr(info, "mode", "python")
    if isinstance(value, ObjectId):
        return str(value) if mode == "json" else value
    if hasattr(value, "model_dump"):
        return value.model_dump(by_alias=True, mode=mode)
    return value


def resolve_target_class(doc_class: type, field_name: str) -> type:
    """Return the Document class a ``Ref[...]`` field points to.

    Raises:
        ValueError: If the field is not a reference or its target is unknown.
    """
    from pygoose_paginate.core.document import _document_registry

    field = doc_class.model_fields.get(field_name)
    if field is None:
        raise ValueError(f"{doc_class.__name__} has no field '{field_name}' to populate")

    # Optional[Ref[X]] wraps the Ref type in a Union
    candidates = [field.annotation, *get_args(field.annotation)]
    target = next(
        (getattr(c, "__ref_target__") for c in candidates if hasattr(c, "__ref_target__")),
        None,
    )
    if target is None:
        raise ValueError(f"Field '{field_name}' on {doc_class.__name__} is not a Ref")

    if isinstance(target, str):
        if target not in _document_registry:
            raise ValueError(
                f"Cannot resolve reference '{target}'. "
                f"Known documents: {list(_document_registry)}"
            )
        return _document_registry[target]
    return target


def parse_populate_spec(spec: PopulateSpec) -> tuple[list[str], Any]:
    """Split a populate spec into path segments and an optional select."""
    if isinstance(spec, Mapping):
        path, select = spec.get("path"), spec.get("select")
    else:
        path, select = spec, None
    if not isinstance(path, str) or not path:
        raise ValueError(f"Invalid populate spec: {spec!r}")

    parts = path.split(".")
    if len(parts) > MAX_POPULATE_DEPTH:
        raise ValueError(f"Populate path exceeds maximum depth ({MAX_POPULATE_DEPTH}): {path}")
    if not all(parts):
        raise ValueError(f"Invalid populate path (empty segment): {path}")
    return parts, select


def _get(doc: Any, field: str) -> Any:
    if isinstance(doc, dict):
        return doc.get(field)
    return getattr(doc, field, None)


def _set(doc: Any, field: str, value: Any) -> None:
    if isinstance(doc, dict):
        doc[field] = value
    else:
        object.__setattr__(doc, field, value)


class PopulateEngine:
    """Resolves reference fields on a batch of documents.

    Works on Document instances, or on raw dicts when ``lean`` is set.
    One ``$in`` query per path level; targets are cached per engine.
    """

    def __init__(self, lean: bool = False) -> None:
        self._lean = lean
        self._cache: dict[tuple[Any, ...], Any] = {}

    async def populate(self, docs: list[Any], spec: PopulateSpec, doc_class: type) -> None:
        """Resolve ``spec`` on ``docs``, level by level for dotted paths.

        A ``select`` in a dict spec applies to the last level only.
        """
        parts, select = parse_populate_spec(spec)
        current_docs, current_class = docs, doc_class
        for depth, part in enumerate(parts):
            if not current_docs:
                break
            target_class = resolve_target_class(current_class, part)
            projection = None
            if depth == len(parts) - 1 and select is not None:
                from pygoose_paginate.core.queryset import normalize_projection

                projection = normalize_projection(select)
            current_docs = await self.populate_many(current_docs, part, target_class, projection)
            current_class = target_class

    async def populate_many(
        self,
        docs: list[Any],
        field: str,
        target_class: type,
        projection: ProjectionSpec | None = None,
    ) -> list[Any]:
        """Batch-resolve one reference field. Returns the distinct targets."""
        id_to_docs: dict[ObjectId, list[Any]] = {}
        for doc in docs:
            value = _get(doc, field)
            if isinstance(value, ObjectId):
                id_to_docs.setdefault(value, []).append(doc)
        if not id_to_docs:
            return []

        scope = (target_class._collection_name, tuple(sorted((projection or {}).items())))
        resolved: dict[ObjectId, Any] = {}
        missing = []
        for oid in id_to_docs:
            if (*scope, oid) in self._cache:
                resolved[oid] = self._cache[(*scope, oid)]
            else:
                missing.append(oid)

        if missing:
            id_filter = {"_id": {"$in": missing}}
            async with track_query("populate", target_class._collection_name, target_class.__name__, filter=id_filter) as ctx:
                cursor = target_class.get_collection().find(id_filter, projection)
                async for raw in cursor:
                    target = raw if self._lean else target_class._from_mongo(raw, partial=projection is not None)
                    self._cache[(*scope, raw["_id"])] = target
                    resolved[raw["_id"]] = target
                ctx["result_count"] = len(resolved)

        # Targets that no longer exist keep their ObjectId
        for oid, target in resolved.items():
            for doc in id_to_docs[oid]:
                _set(doc, field, target)
        return list(resolved.values())
