"""One-time transfer of a guest's cached accounts and debts into the owner's store."""

from typing import Literal

from pydantic import BaseModel

from app.cache.base import EphemeralCache
from app.core.audit import audit_entry
from app.core.logging import get_logger
from app.models.account import Account
from app.models.audit_log import AuditLog
from app.models.debt import Debt
from app.services import guest as guest_service
from app.store.base import DocumentStore

log = get_logger(__name__)

_in_flight: set[str] = set()

# A crashed holder releases the lock when it expires
LOCK_TTL_SECONDS = 120


class MigrationResult(BaseModel):
    status: Literal["already_done", "nothing_to_migrate", "in_progress", "migrated"]
    accounts: int = 0
    debts: int = 0
    dropped_debts: int = 0


def marker_key(owner_id: str) -> str:
    return f"migration-done-{owner_id}"


def lock_key(owner_id: str) -> str:
    return f"migration-lock-{owner_id}"


def is_migrating(owner_id: str) -> bool:
    return owner_id in _in_flight


async def migrate_local_data(
    store: DocumentStore,
    cache: EphemeralCache,
    owner_id: str,
    guest_id: str | None,
) -> MigrationResult:
    """
    Copy the guest's cached accounts and debts into the owner's partition.

    Accounts get new store ids; each debt's ``account_id`` is remapped through
    the old -> new id table. A debt whose account id is missing from the table
    (dangling, or never linked) is dropped and logged, not repaired.

    All creates commit in one batch. The per-owner marker is set only after the
    commit succeeds, so any failure leaves the migration to be retried from
    scratch on the next login. The cached guest data is left in place.

    Only one migration per owner runs at a time, across processes: a second
    caller gets ``in_progress`` and writes nothing.
    """
    if await cache.exists(marker_key(owner_id)):
        return MigrationResult(status="already_done")
    if not guest_id:
        return MigrationResult(status="nothing_to_migrate")
    if owner_id in _in_flight or not await cache.add(lock_key(owner_id), "1", ttl_seconds=LOCK_TTL_SECONDS):
        log.info("migration_skipped_in_progress")
        return MigrationResult(status="in_progress")

    _in_flight.add(owner_id)
    try:
        # The previous holder may have finished between the marker check and the lock
        if await cache.exists(marker_key(owner_id)):
            return MigrationResult(status="already_done")
        return await _migrate(store, cache, owner_id, guest_id)
    finally:
        _in_flight.discard(owner_id)
        await cache.delete(lock_key(owner_id))


async def _migrate(store: DocumentStore, cache: EphemeralCache, owner_id: str, guest_id: str) -> MigrationResult:
    local_accounts = await guest_service.load_accounts(cache, guest_id)
    local_debts = await guest_service.load_debts(cache, guest_id)
    if not local_accounts and not local_debts:
        return MigrationResult(status="nothing_to_migrate")

    batch = store.batch()
    id_map: dict[str, str] = {}
    for local in local_accounts:
        new_id = store.new_id()
        batch.set(owner_id, Account.collection, new_id, Account(name=local.name, balance=local.balance).to_document())
        if local.id:
            id_map[local.id] = new_id

    migrated_debts = 0
    dropped = 0
    for local in local_debts:
        new_account_id = id_map.get(local.account_id) if local.account_id else None
        if not new_account_id:
            dropped += 1
            log.warning("debt_dropped_on_migration", debt_name=local.name, old_account_id=local.account_id)
            continue
        debt = Debt(name=local.name, amount=local.amount, account_id=new_account_id)
        batch.set(owner_id, Debt.collection, store.new_id(), debt.to_document())
        migrated_debts += 1

    audit = audit_entry(
        "local_data_migrated",
        "owner",
        owner_id,
        {"accounts": len(local_accounts), "debts": migrated_debts, "dropped_debts": dropped},
    )
    batch.set(owner_id, AuditLog.collection, store.new_id(), audit.to_document())
    await batch.commit()
    await cache.set(marker_key(owner_id), "true")

    log.info("migration_done", accounts=len(local_accounts), debts=migrated_debts, dropped_debts=dropped)
    return MigrationResult(
        status="migrated",
        accounts=len(local_accounts),
        debts=migrated_debts,
        dropped_debts=dropped,
    )
