"""Accounts CRUD; delete is refused while any debt references the account."""

from decimal import Decimal

from app.core.audit import log_event
from app.core.exceptions import NotFoundError, ReferentialIntegrityError
from app.core.logging import get_logger
from app.core.validation import parse_decimal, validate_required_str
from app.models.account import Account
from app.models.debt import Debt
from app.store.base import DocumentStore

log = get_logger(__name__)


async def list_accounts(store: DocumentStore, owner_id: str) -> list[Account]:
    docs = await store.list(owner_id, Account.collection, order_by="name")
    return [Account.from_document(d) for d in docs]


async def get_account(store: DocumentStore, owner_id: str, account_id: str) -> Account | None:
    doc = await store.get(owner_id, Account.collection, account_id)
    return Account.from_document(doc) if doc else None


async def create_account(
    store: DocumentStore,
    owner_id: str,
    name: str,
    balance: Decimal | str | float | int = 0,
) -> Account:
    account = Account(
        id=store.new_id(),
        name=validate_required_str(name, "name"),
        balance=parse_decimal(balance, "balance"),
    )
    await store.set(owner_id, Account.collection, account.id, account.to_document())
    log.info("account_created", account_id=account.id)
    return account


async def update_account(store: DocumentStore, owner_id: str, account: Account) -> Account:
    """Replace name and balance of an existing account. Past transactions keep their old account_name."""
    if not account.id or not await get_account(store, owner_id, account.id):
        raise NotFoundError("Account not found")
    updated = Account(
        id=account.id,
        name=validate_required_str(account.name, "name"),
        balance=parse_decimal(account.balance, "balance"),
    )
    await store.set(owner_id, Account.collection, updated.id, updated.to_document())
    log.info("account_updated", account_id=updated.id)
    return updated


async def referencing_debts(store: DocumentStore, owner_id: str, account_id: str) -> list[Debt]:
    docs = await store.list(owner_id, Debt.collection, where={"account_id": account_id})
    return [Debt.from_document(d) for d in docs]


async def delete_account(store: DocumentStore, owner_id: str, account_id: str) -> None:
    debts = await referencing_debts(store, owner_id, account_id)
    if debts:
        raise ReferentialIntegrityError(
            "Account has associated debts",
            details={"account_id": account_id, "debt_ids": [d.id for d in debts]},
        )
    if not await get_account(store, owner_id, account_id):
        raise NotFoundError("Account not found")
    await store.delete(owner_id, Account.collection, account_id)
    log.info("account_deleted", account_id=account_id)
    await log_event(store, owner_id, "account_deleted", "account", account_id)
