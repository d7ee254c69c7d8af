"""In-memory stand-in for FirestoreRESTClient.

Implements the subset of the REST client surface used by the repositories
and the media store: collection(), document() get/set/update/delete,
create-if-absent, single-field where queries and full collection streams.
Snapshots and DocumentExistsError are the real ones from the client module.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import AsyncIterator
from typing import Any

from app.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentSnapshot,
)


class FakeFirestore:
    """Collections are plain dicts: {collection_name: {doc_id: data}}.

    fail(collection, op, exc, after=n) makes the (n+1)-th matching call raise exc.
    calls records (op, collection, doc_id) for every document operation.
    """

    def __init__(self) -> None:
        self.data: dict[str, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, str, str]] = []
        self._failures: dict[tuple[str, str], tuple[Exception, int]] = {}

    def collection(self, collection_id: str) -> FakeCollection:
        return FakeCollection(self, collection_id)

    def fail(self, collection: str, op: str, exc: Exception, after: int = 0) -> None:
        self._failures[(collection, op)] = (exc, after)

    async def _record(self, op: str, collection: str, doc_id: str) -> None:
        # Yield so concurrent readers interleave.
        await asyncio.sleep(0)
        self.calls.append((op, collection, doc_id))
        failure = self._failures.get((collection, op))
        if failure is None:
            return
        exc, after = failure
        if after > 0:
            self._failures[(collection, op)] = (exc, after - 1)
            return
        del self._failures[(collection, op)]
        raise exc

    def docs(self, collection: str) -> dict[str, dict[str, Any]]:
        return self.data.setdefault(collection, {})

    def count(self, op: str, collection: str | None = None) -> int:
        return sum(
            1
            for o, c, _ in self.calls
            if o == op and (collection is None or c == collection)
        )

    async def aclose(self) -> None:
        return None


class FakeDocument:
    def __init__(self, store: FakeFirestore, collection: str, doc_id: str) -> None:
        self._store = store
        self._collection = collection
        self.id = doc_id

    async def set(self, data: dict[str, Any]) -> None:
        await self._store._record("set", self._collection, self.id)
        self._store.docs(self._collection)[self.id] = copy.deepcopy(data)

    async def get(self) -> DocumentSnapshot | None:
        await self._store._record("get", self._collection, self.id)
        data = self._store.docs(self._collection).get(self.id)
        if data is None:
            return None
        return DocumentSnapshot(self.id, copy.deepcopy(data))

    async def update(self, updates: dict[str, Any]) -> DocumentSnapshot | None:
        await self._store._record("update", self._collection, self.id)
        docs = self._store.docs(self._collection)
        if self.id not in docs:
            return None
        docs[self.id].update(copy.deepcopy(updates))
        return DocumentSnapshot(self.id, copy.deepcopy(docs[self.id]))

    async def delete(self, *, must_exist: bool = False) -> bool:
        await self._store._record("delete", self._collection, self.id)
        existed = self._store.docs(self._collection).pop(self.id, None) is not None
        return existed or not must_exist


class FakeQuery:
    def __init__(self, collection: FakeCollection, field: str, value: Any) -> None:
        self._collection = collection
        self._field = field
        self._value = value
        self._limit: int | None = None

    def limit(self, n: int) -> FakeQuery:
        self._limit = n
        return self

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        matched = 0
        async for snapshot in self._collection.stream():
            if snapshot.to_dict().get(self._field) != self._value:
                continue
            yield snapshot
            matched += 1
            if self._limit is not None and matched >= self._limit:
                return


class FakeCollection:
    def __init__(self, store: FakeFirestore, collection_id: str) -> None:
        self._store = store
        self.id = collection_id

    def document(self, document_id: str) -> FakeDocument:
        return FakeDocument(self._store, self.id, document_id)

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        await self._store._record("create", self.id, document_id)
        docs = self._store.docs(self.id)
        if document_id in docs:
            raise DocumentExistsError("Document already exists")
        docs[document_id] = copy.deepcopy(data)

    def where(self, field: str, op: str, value: Any) -> FakeQuery:
        if op != "==":
            raise NotImplementedError(op)
        return FakeQuery(self, field, value)

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        await self._store._record("stream", self.id, "")
        for doc_id, data in list(self._store.docs(self.id).items()):
            yield DocumentSnapshot(doc_id, copy.deepcopy(data))
