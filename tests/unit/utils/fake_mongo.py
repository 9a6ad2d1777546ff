"""
In-memory stand-in for the parts of the motor API the repository uses.

Supports equality and ``$in`` filters, projections, skip/limit, unique
indexes (raising pymongo's real DuplicateKeyError) and find_one_and_update
with ``$set`` / ``$unset``.
"""

from __future__ import annotations

from copy import deepcopy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError


def _matches(doc: Dict[str, Any], query: Optional[Dict[str, Any]]) -> bool:
    for key, expected in (query or {}).items():
        if isinstance(expected, dict) and "$in" in expected:
            if doc.get(key) not in expected["$in"]:
                return False
        elif doc.get(key) != expected:
            return False
    return True


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    doc = deepcopy(doc)
    if not projection:
        return doc
    include = {k for k, v in projection.items() if v and k != "_id"}
    if include:
        out = {k: v for k, v in doc.items() if k in include}
        if projection.get("_id", 1):
            out["_id"] = doc["_id"]
        return out
    return {k: v for k, v in doc.items() if projection.get(k, 1)}


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def skip(self, n: int) -> "FakeCursor":
        self._skip = n
        return self

    def limit(self, n: int) -> "FakeCursor":
        self._limit = n
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        docs = self._docs[self._skip:]
        if self._limit:
            docs = docs[: self._limit]
        if length:
            docs = docs[:length]
        return docs


class FakeCollection:
    def __init__(self, name: str):
        self.name = name
        self.docs: List[Dict[str, Any]] = []
        self.unique_fields: set[str] = set()
        self.fail_with: Optional[Exception] = None

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _check_unique(self, doc: Dict[str, Any], ignore_id: Any = None) -> None:
        for field in self.unique_fields:
            if field not in doc:
                continue
            for other in self.docs:
                if other["_id"] != ignore_id and other.get(field) == doc[field]:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: test.{self.name} "
                        f"index: {field}_unique dup key: {{ {field}: \"{doc[field]}\" }}",
                        11000,
                        {"keyPattern": {field: 1}, "keyValue": {field: doc[field]}},
                    )

    async def create_index(self, keys, unique: bool = False, name: Optional[str] = None):
        if unique:
            self.unique_fields.add(keys[0][0])
        return name or f"{keys[0][0]}_1"

    async def insert_one(self, document: Dict[str, Any]):
        self._maybe_fail()
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.docs.append(deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    def find(self, filter: Optional[Dict[str, Any]] = None, projection: Optional[Dict[str, Any]] = None):
        self._maybe_fail()
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, filter)])

    async def find_one(self, filter: Optional[Dict[str, Any]] = None, projection: Optional[Dict[str, Any]] = None):
        self._maybe_fail()
        for doc in self.docs:
            if _matches(doc, filter):
                return _project(doc, projection)
        return None

    async def count_documents(self, filter: Dict[str, Any]) -> int:
        self._maybe_fail()
        return sum(1 for d in self.docs if _matches(d, filter))

    async def find_one_and_update(self, filter, update, return_document=ReturnDocument.BEFORE):
        self._maybe_fail()
        for index, doc in enumerate(self.docs):
            if not _matches(doc, filter):
                continue
            updated = deepcopy(doc)
            updated.update(update.get("$set", {}))
            for key in update.get("$unset", {}):
                updated.pop(key, None)
            self._check_unique(updated, ignore_id=doc["_id"])
            self.docs[index] = updated
            return deepcopy(updated if return_document == ReturnDocument.AFTER else doc)
        return None

    async def delete_many(self, filter: Dict[str, Any]):
        self._maybe_fail()
        keep = [d for d in self.docs if not _matches(d, filter)]
        deleted = len(self.docs) - len(keep)
        self.docs = keep
        return SimpleNamespace(deleted_count=deleted, acknowledged=True)


class FakeDatabase:
    def __init__(self, name: str):
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


class FakeAdmin:
    def __init__(self):
        self.healthy = True

    async def command(self, name: str):
        if not self.healthy:
            raise ConnectionError("server selection timed out")
        return {"ok": 1.0}


class FakeMongoClient:
    def __init__(self):
        self.databases: Dict[str, FakeDatabase] = {}
        self.admin = FakeAdmin()
        self.closed = False

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    def close(self) -> None:
        self.closed = True
