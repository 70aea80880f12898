"""Owner-partitioned document store with atomic write batches."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Literal

from app.core.config import get_settings


@dataclass(frozen=True)
class WriteOp:
    kind: Literal["set", "delete"]
    owner_id: str
    collection: str
    doc_id: str
    data: dict[str, Any] = field(default_factory=dict)


class WriteBatch:
    """Collects set/delete operations; ``commit`` applies all of them or none."""

    def __init__(self, store: "DocumentStore") -> None:
        self._store = store
        self._ops: list[WriteOp] = []
        self._committed = False

    @property
    def ops(self) -> list[WriteOp]:
        return list(self._ops)

    def set(self, owner_id: str, collection: str, doc_id: str, data: dict[str, Any]) -> "WriteBatch":
        self._ops.append(WriteOp("set", owner_id, collection, doc_id, dict(data)))
        return self

    def delete(self, owner_id: str, collection: str, doc_id: str) -> "WriteBatch":
        self._ops.append(WriteOp("delete", owner_id, collection, doc_id))
        return self

    async def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Batch already committed")
        self._committed = True
        if self._ops:
            await self._store.commit_batch(self._ops)


class DocumentStore(ABC):
    """
    Every call is scoped by ``owner_id``; documents of one owner are never
    visible through another owner's scope. Documents are plain dicts; reads
    return them with an ``id`` key.
    """

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    @abstractmethod
    async def get(self, owner_id: str, collection: str, doc_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    async def list(
        self,
        owner_id: str,
        collection: str,
        where: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return documents matching all equality filters in ``where``."""
        ...

    @abstractmethod
    async def set(self, owner_id: str, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Create or fully replace a document."""
        ...

    @abstractmethod
    async def delete(self, owner_id: str, collection: str, doc_id: str) -> None:
        ...

    @abstractmethod
    async def commit_batch(self, ops: list[WriteOp]) -> None:
        """Apply ``ops`` atomically."""
        ...

    async def close(self) -> None:
        pass


@lru_cache
def get_store() -> DocumentStore:
    settings = get_settings()
    if settings.store_backend == "mongo":
        from app.store.mongo import MongoStore
        return MongoStore()
    from app.store.memory import MemoryStore
    return MemoryStore()
