"""Debts CRUD. Debts only point at accounts; deleting a debt never cascades."""

from decimal import Decimal

from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.validation import parse_amount, validate_required_str
from app.models.account import Account
from app.models.debt import Debt
from app.store.base import DocumentStore

log = get_logger(__name__)


async def _check_account_ref(store: DocumentStore, owner_id: str, account_id: str | None) -> str | None:
    if not account_id:
        return None
    if not await store.get(owner_id, Account.collection, account_id):
        raise ValidationError("Linked account does not exist", details={"field": "account_id"})
    return account_id


async def list_debts(store: DocumentStore, owner_id: str) -> list[Debt]:
    docs = await store.list(owner_id, Debt.collection, order_by="name")
    return [Debt.from_document(d) for d in docs]


async def get_debt(store: DocumentStore, owner_id: str, debt_id: str) -> Debt | None:
    doc = await store.get(owner_id, Debt.collection, debt_id)
    return Debt.from_document(doc) if doc else None


async def create_debt(
    store: DocumentStore,
    owner_id: str,
    name: str,
    amount: Decimal | str | float | int,
    account_id: str | None = None,
) -> Debt:
    debt = Debt(
        id=store.new_id(),
        name=validate_required_str(name, "name"),
        amount=parse_amount(amount),
        account_id=await _check_account_ref(store, owner_id, account_id),
    )
    await store.set(owner_id, Debt.collection, debt.id, debt.to_document())
    log.info("debt_created", debt_id=debt.id, account_id=debt.account_id)
    return debt


async def update_debt(store: DocumentStore, owner_id: str, debt: Debt) -> Debt:
    if not debt.id or not await get_debt(store, owner_id, debt.id):
        raise NotFoundError("Debt not found")
    updated = Debt(
        id=debt.id,
        name=validate_required_str(debt.name, "name"),
        amount=parse_amount(debt.amount),
        account_id=await _check_account_ref(store, owner_id, debt.account_id),
    )
    await store.set(owner_id, Debt.collection, updated.id, updated.to_document())
    log.info("debt_updated", debt_id=updated.id)
    return updated


async def delete_debt(store: DocumentStore, owner_id: str, debt_id: str) -> None:
    if not await get_debt(store, owner_id, debt_id):
        raise NotFoundError("Debt not found")
    await store.delete(owner_id, Debt.collection, debt_id)
    log.info("debt_deleted", debt_id=debt_id)
