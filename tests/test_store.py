"""Memory store: owner partitioning, queries and batch atomicity."""

import pytest

pytestmark = pytest.mark.asyncio


async def test_owner_partitions_are_isolated(store):
    await store.set("alice", "accounts", "a1", {"name": "Cash", "balance": "10"})
    assert await store.get("bob", "accounts", "a1") is None
    assert await store.list("bob", "accounts") == []
    assert await store.get("alice", "accounts", "a1") == {"id": "a1", "name": "Cash", "balance": "10"}


async def test_list_filters_orders_and_limits(store):
    await store.set("o", "debts", "d1", {"name": "b", "account_id": "x"})
    await store.set("o", "debts", "d2", {"name": "a", "account_id": "x"})
    await store.set("o", "debts", "d3", {"name": "c", "account_id": "y"})
    rows = await store.list("o", "debts", where={"account_id": "x"}, order_by="name")
    assert [r["id"] for r in rows] == ["d2", "d1"]
    rows = await store.list("o", "debts", order_by="name", descending=True, limit=1)
    assert [r["id"] for r in rows] == ["d3"]


async def test_returned_documents_are_copies(store):
    await store.set("o", "accounts", "a1", {"name": "Cash", "tags": ["x"]})
    doc = await store.get("o", "accounts", "a1")
    doc["tags"].append("y")
    assert (await store.get("o", "accounts", "a1"))["tags"] == ["x"]


async def test_batch_commit_applies_sets_and_deletes(store):
    await store.set("o", "accounts", "old", {"name": "Old"})
    batch = store.batch()
    batch.set("o", "accounts", "new", {"name": "New"})
    batch.delete("o", "accounts", "old")
    assert await store.get("o", "accounts", "new") is None  # nothing visible before commit
    await batch.commit()
    assert await store.get("o", "accounts", "old") is None
    assert (await store.get("o", "accounts", "new"))["name"] == "New"


async def test_batch_cannot_be_committed_twice(store):
    batch = store.batch()
    batch.set("o", "accounts", "a", {"name": "A"})
    await batch.commit()
    with pytest.raises(RuntimeError):
        await batch.commit()


async def test_backends_load_and_share_the_batch_signature():
    import typing

    from app.store.base import DocumentStore, WriteOp
    from app.store.memory import MemoryStore
    from app.store.mongo import MongoStore

    assert issubclass(MemoryStore, DocumentStore)
    assert issubclass(MongoStore, DocumentStore)
    for backend in (DocumentStore, MemoryStore, MongoStore):
        assert typing.get_type_hints(backend.commit_batch)["ops"] == list[WriteOp]
