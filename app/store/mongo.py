"""MongoDB backend: one collection per entity kind, ``owner_id`` on every document."""

from __future__ import annotations

from typing import Any

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from app.core.config import get_settings
from app.core.exceptions import StoreError
from app.core.logging import get_logger
from app.store.base import DocumentStore, WriteOp

log = get_logger(__name__)


class MongoStore(DocumentStore):
    def __init__(self) -> None:
        from app.db.init import create_mongo_client
        settings = get_settings()
        self._client = create_mongo_client(settings.mongodb_uri)
        self._db = self._client[settings.mongodb_db_name]

    def _filter(self, owner_id: str, doc_id: str | None = None, where: dict[str, Any] | None = None) -> dict:
        q: dict[str, Any] = {"owner_id": owner_id}
        if doc_id is not None:
            q["_id"] = doc_id
        if where:
            q.update(where)
        return q

    @staticmethod
    def _to_doc(raw: dict[str, Any]) -> dict[str, Any]:
        raw = dict(raw)
        raw.pop("owner_id", None)
        raw["id"] = str(raw.pop("_id"))
        return raw

    @staticmethod
    def _to_raw(owner_id: str, doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
        body = {k: v for k, v in data.items() if k != "id"}
        return {"_id": doc_id, "owner_id": owner_id, **body}

    async def ensure_indexes(self, collection: str, indexes: list[list[tuple[str, int]]]) -> None:
        try:
            await self._db[collection].create_index([("owner_id", ASCENDING)])
            for keys in indexes:
                await self._db[collection].create_index(keys)
        except PyMongoError as e:
            raise StoreError(f"Could not create indexes on {collection}") from e

    async def get(self, owner_id: str, collection: str, doc_id: str) -> dict[str, Any] | None:
        try:
            raw = await self._db[collection].find_one(self._filter(owner_id, doc_id))
        except PyMongoError as e:
            raise StoreError(f"Could not read {collection}") from e
        return self._to_doc(raw) if raw else None

    async def list(
        self,
        owner_id: str,
        collection: str,
        where: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        cursor = self._db[collection].find(self._filter(owner_id, where=where))
        if order_by:
            cursor = cursor.sort(order_by, DESCENDING if descending else ASCENDING)
        if limit is not None:
            cursor = cursor.limit(limit)
        try:
            rows = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreError(f"Could not list {collection}") from e
        return [self._to_doc(r) for r in rows]

    async def set(self, owner_id: str, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        try:
            await self._db[collection].replace_one(
                self._filter(owner_id, doc_id),
                self._to_raw(owner_id, doc_id, data),
                upsert=True,
            )
        except PyMongoError as e:
            raise StoreError(f"Could not write {collection}") from e

    async def delete(self, owner_id: str, collection: str, doc_id: str) -> None:
        try:
            await self._db[collection].delete_one(self._filter(owner_id, doc_id))
        except PyMongoError as e:
            raise StoreError(f"Could not delete from {collection}") from e

    async def commit_batch(self, ops: list[WriteOp]) -> None:
        """Multi-document transaction; requires a replica set or Atlas cluster."""
        try:
            async with await self._client.start_session() as session:
                async with session.start_transaction():
                    for op in ops:
                        coll = self._db[op.collection]
                        if op.kind == "set":
                            await coll.replace_one(
                                self._filter(op.owner_id, op.doc_id),
                                self._to_raw(op.owner_id, op.doc_id, op.data),
                                upsert=True,
                                session=session,
                            )
                        else:
                            await coll.delete_one(self._filter(op.owner_id, op.doc_id), session=session)
        except PyMongoError as e:
            log.error("batch_commit_failed", ops=len(ops), reason=str(e))
            raise StoreError("Batch commit failed") from e

    async def close(self) -> None:
        self._client.close()
