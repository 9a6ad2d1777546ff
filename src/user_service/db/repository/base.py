from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator, Optional, Sequence, Union

from bson import ObjectId
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ...exceptions import (
    DuplicateKey,
    InternalError,
    InvalidArgument,
    NotFound,
    RepositoryError,
    ValidationFailed,
    normalize_error,
)
from ...utils.validation import first_error_message
from ..registry import ModelRegistry, ResourceDescriptor

if TYPE_CHECKING:
    from ..engine import MongoEngine

logger = logging.getLogger(__name__)

Document = dict[str, Any]
PopulateDirective = Union[str, Mapping[str, Any]]

_DUP_KEY_RE = re.compile(r"dup key: \{\s*:?\s*\"?([\w.]+)\"?\s*:")


@dataclass
class QueryResult:
    """Result envelope of ``get_many``. Pagination fields are only set when paginated."""

    data: list[Document]
    total: Optional[int] = None
    page: Optional[int] = None
    limit: Optional[int] = None
    total_pages: Optional[int] = None

    @property
    def paginated(self) -> bool:
        return self.page is not None and self.limit is not None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"data": self.data}
        for key in ("total", "page", "limit", "total_pages"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


def parse_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise InvalidArgument("Invalid ID format", details={"id": str(value)})


def _duplicate_field(exc: DuplicateKeyError) -> str:
    details = exc.details or {}
    key_pattern = details.get("keyPattern") or details.get("keyValue")
    if key_pattern:
        return next(iter(key_pattern))
    match = _DUP_KEY_RE.search(details.get("errmsg") or str(exc))
    return match.group(1) if match else "value"


def _normalize_populate(populate: Union[PopulateDirective, Sequence[PopulateDirective], None]) -> list[dict[str, Any]]:
    if not populate:
        return []
    items = [populate] if isinstance(populate, (str, Mapping)) else list(populate)
    directives: list[dict[str, Any]] = []
    for item in items:
        if isinstance(item, str):
            directives.extend({"path": path} for path in item.split())
        elif isinstance(item, Mapping) and item.get("path"):
            directives.append({"path": item["path"], "select": item.get("select")})
        else:
            raise InvalidArgument("Invalid populate directive", details={"populate": repr(item)})
    return directives


class BaseRepository:
    """Generic CRUD over any registered resource, addressed by name.

    - Resources are resolved through the ModelRegistry on every call; an
      unknown name raises ResourceResolutionError before the store is touched.
    - Documents are plain dicts as returned by the driver (``_id`` is an ObjectId).
    - Every failure leaves as a RepositoryError; raw driver errors are wrapped.
    """

    def __init__(self, engine: "MongoEngine", registry: ModelRegistry):
        self.engine = engine
        self.registry = registry

    # ------------------------------------------------------------------ helpers

    def _collection(self, descriptor: ResourceDescriptor):
        return self.engine.collection(descriptor.collection)

    @contextmanager
    def _store_errors(self, resource: str, default_message: str, *, keep_message: bool = True) -> Iterator[None]:
        try:
            yield
        except RepositoryError as exc:
            log = logger.warning if exc.status_code < 500 else logger.error
            log("%s on %s: %s", type(exc).__name__, resource, exc.message, extra={"resource": resource})
            raise
        except DuplicateKeyError as exc:
            field = _duplicate_field(exc)
            logger.warning("Duplicate key on %s.%s", resource, field, extra={"resource": resource})
            raise DuplicateKey(field) from exc
        except Exception as exc:
            logger.error("Store error on %s: %s", resource, exc, exc_info=True, extra={"resource": resource})
            if keep_message:
                raise normalize_error(exc, default_message, details=str(exc)) from exc
            raise InternalError(default_message, details=str(exc)) from exc

    @staticmethod
    def _validate(descriptor: ResourceDescriptor, data: Mapping[str, Any]) -> Document:
        payload = {k: v for k, v in data.items() if k != "_id"}
        try:
            model = descriptor.schema.model_validate(payload)
        except ValidationError as exc:
            message = first_error_message(exc.errors(include_url=False))
            raise ValidationFailed(message, details=exc.errors(include_url=False, include_context=False)) from exc
        return model.model_dump(exclude_none=True)

    def _build_update(self, descriptor: ResourceDescriptor, current: Document, data: Mapping[str, Any]) -> Optional[dict[str, Any]]:
        validated = self._validate(descriptor, {**current, **data})
        fields = descriptor.schema.model_fields
        to_set = {k: validated[k] for k in data if k in validated}
        to_unset = {k: "" for k in data if k not in validated and k in fields}
        update: dict[str, Any] = {}
        if to_set:
            update["$set"] = to_set
        if to_unset:
            update["$unset"] = to_unset
        return update or None

    @staticmethod
    def _coerce_filter(filter: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        query = dict(filter or {})
        oid = query.get("_id")
        if isinstance(oid, str) and ObjectId.is_valid(oid):
            query["_id"] = ObjectId(oid)
        return query

    async def _populate(self, descriptor: ResourceDescriptor, document: Document, populate) -> Document:
        for directive in _normalize_populate(populate):
            path, select = directive["path"], directive.get("select")
            target_name = descriptor.references.get(path)
            if target_name is None:
                raise InvalidArgument(
                    f"Cannot populate '{path}' on '{descriptor.name}'",
                    details={"path": path},
                )
            value = document.get(path)
            if value is None:
                continue
            target = self._collection(self.registry.resolve(target_name))
            if isinstance(value, list):
                found = await target.find({"_id": {"$in": value}}, select).to_list(length=None)
                by_id = {doc["_id"]: doc for doc in found}
                document[path] = [by_id[v] for v in value if v in by_id]
            else:
                document[path] = await target.find_one({"_id": value}, select)
        return document

    # --------------------------------------------------------------- operations

    async def create(self, resource: str, data: Mapping[str, Any]) -> Document:
        with self._store_errors(resource, "Error saving to database"):
            descriptor = self.registry.resolve(resource)
            document = self._validate(descriptor, data)
            result = await self._collection(descriptor).insert_one(document)
            logger.debug("Created %s %s", resource, result.inserted_id, extra={"resource": resource})
            return {"_id": result.inserted_id, **{k: v for k, v in document.items() if k != "_id"}}

    async def get_by_id(self, resource: str, id: Any) -> Optional[Document]:
        with self._store_errors(resource, "Error fetching record", keep_message=False):
            descriptor = self.registry.resolve(resource)
            oid = parse_object_id(id)
            return await self._collection(descriptor).find_one({"_id": oid})

    async def get_by_id_with_filter(
        self,
        resource: str,
        id: Any,
        filter: Optional[Mapping[str, Any]] = None,
        populate: Union[PopulateDirective, Sequence[PopulateDirective], None] = None,
    ) -> Optional[Document]:
        with self._store_errors(resource, "Error fetching record by ID"):
            descriptor = self.registry.resolve(resource)
            oid = parse_object_id(id)
            query = {"_id": oid, **self._coerce_filter(filter)}
            document = await self._collection(descriptor).find_one(query)
            if document is None:
                return None
            return await self._populate(descriptor, document, populate)

    async def get_many(
        self,
        resource: str,
        filter: Optional[Mapping[str, Any]] = None,
        *,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> QueryResult:
        with self._store_errors(resource, "Error fetching records"):
            descriptor = self.registry.resolve(resource)
            query = self._coerce_filter(filter)
            coll = self._collection(descriptor)
            cursor = coll.find(query, dict(projection) if projection else None)

            if not (page and limit):
                documents = await cursor.to_list(length=None)
                return QueryResult(data=documents, total=0) if not documents else QueryResult(data=documents)

            if page < 1 or limit < 1:
                raise InvalidArgument("page and limit must be positive integers", details={"page": page, "limit": limit})
            skip = (page - 1) * limit
            documents = await cursor.skip(skip).limit(limit).to_list(length=None)
            total = await coll.count_documents(query)
            return QueryResult(
                data=documents,
                total=total,
                page=page,
                limit=limit,
                total_pages=math.ceil(total / limit),
            )

    async def update_by_id(self, resource: str, id: Any, data: Mapping[str, Any]) -> Optional[Document]:
        with self._store_errors(resource, "Error updating record"):
            descriptor = self.registry.resolve(resource)
            oid = parse_object_id(id)
            coll = self._collection(descriptor)
            current = await coll.find_one({"_id": oid})
            if current is None:
                return None
            update = self._build_update(descriptor, current, data or {})
            if update is None:
                return current
            return await coll.find_one_and_update(
                {"_id": oid}, update, return_document=ReturnDocument.AFTER
            )

    async def update_by_filter(self, resource: str, filter: Mapping[str, Any], data: Mapping[str, Any]) -> Document:
        with self._store_errors(resource, "Error updating record"):
            descriptor = self.registry.resolve(resource)
            if not filter:
                raise InvalidArgument("Filter criteria is required")
            if not data:
                raise InvalidArgument("No valid fields to update")
            coll = self._collection(descriptor)
            current = await coll.find_one(self._coerce_filter(filter))
            if current is None:
                raise NotFound("Record not found")
            update = self._build_update(descriptor, current, data)
            if update is None:
                raise InvalidArgument("No valid fields to update")
            document = await coll.find_one_and_update(
                {"_id": current["_id"]}, update, return_document=ReturnDocument.AFTER
            )
            if document is None:
                raise NotFound("Record not found")
            return document

    async def delete_by_filter(self, resource: str, filter: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Delete every match. An empty filter wipes the whole collection."""
        with self._store_errors(resource, "Error deleting records"):
            descriptor = self.registry.resolve(resource)
            query = self._coerce_filter(filter)
            if not query:
                logger.warning("Bulk delete with empty filter on %s", resource, extra={"resource": resource})
            result = await self._collection(descriptor).delete_many(query)
            return {"deleted_count": result.deleted_count, "acknowledged": result.acknowledged}

    async def delete_many(self, resource: str, filter: Any) -> dict[str, Any]:
        with self._store_errors(resource, "Error deleting records"):
            descriptor = self.registry.resolve(resource)
            if filter is None or not isinstance(filter, Mapping):
                raise InvalidArgument("Invalid filter object")
            result = await self._collection(descriptor).delete_many(self._coerce_filter(filter))
            if result.deleted_count == 0:
                raise NotFound("No matching records found")
            return {
                "message": f"{result.deleted_count} record(s) deleted successfully",
                "deleted_count": result.deleted_count,
            }
