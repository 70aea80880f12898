from __future__ import annotations

import asyncio
import copy
from typing import Any

from app.store.base import DocumentStore, WriteOp


class MemoryStore(DocumentStore):
    """In-process store for development and tests."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    def _partition(self, owner_id: str, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault((owner_id, collection), {})

    async def get(self, owner_id: str, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._partition(owner_id, collection).get(doc_id)
        if doc is None:
            return None
        return {"id": doc_id, **copy.deepcopy(doc)}

    async def list(
        self,
        owner_id: str,
        collection: str,
        where: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        docs = [
            {"id": doc_id, **copy.deepcopy(doc)}
            for doc_id, doc in self._partition(owner_id, collection).items()
            if all(doc.get(k) == v for k, v in (where or {}).items())
        ]
        if order_by:
            docs.sort(key=lambda d: (d.get(order_by) is None, d.get(order_by)), reverse=descending)
        if limit is not None:
            docs = docs[:limit]
        return docs

    async def set(self, owner_id: str, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        async with self._lock:
            self._partition(owner_id, collection)[doc_id] = _strip_id(data)

    async def delete(self, owner_id: str, collection: str, doc_id: str) -> None:
        async with self._lock:
            self._partition(owner_id, collection).pop(doc_id, None)

    async def commit_batch(self, ops: list[WriteOp]) -> None:
        async with self._lock:
            # Stage on a copy so a failure part-way leaves the live data untouched.
            staged = copy.deepcopy(self._data)
            for op in ops:
                partition = staged.setdefault((op.owner_id, op.collection), {})
                if op.kind == "set":
                    partition[op.doc_id] = _strip_id(op.data)
                else:
                    partition.pop(op.doc_id, None)
            self._data = staged


def _strip_id(data: dict[str, Any]) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in data.items() if k != "id"}
