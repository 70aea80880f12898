"""Balance-transaction coordinator and the transaction history."""

from decimal import Decimal, DecimalException

from app.core.audit import audit_entry
from app.core.exceptions import NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.validation import parse_amount, validate_optional_str
from app.models.account import Account
from app.models.audit_log import AuditLog
from app.models.transaction import Transaction, TransactionType
from app.services.accounts import get_account
from app.store.base import DocumentStore

log = get_logger(__name__)

TRANSACTION_TYPES: tuple[TransactionType, ...] = ("deposit", "withdrawal")
DEFAULT_PAGE_SIZE = 50


def apply_to_balance(balance: Decimal, amount: Decimal, type_: TransactionType) -> Decimal:
    """No floor: a withdrawal may take the balance below zero."""
    try:
        return balance + amount if type_ == "deposit" else balance - amount
    except DecimalException as exc:
        raise ValidationError("amount is out of range", details={"field": "amount"}) from exc


async def apply_transaction(
    store: DocumentStore,
    owner_id: str,
    account_id: str,
    amount: object,
    type_: str,
    description: str | None = None,
) -> tuple[Account, Transaction]:
    """
    Adjust an account balance and append the matching transaction record.

    Both documents are written in one atomic batch: either the new balance and
    the transaction are persisted together or neither is. Returns
    (updated_account, transaction).

    Two concurrent calls on the same account are not serialized; each reads
    the balance, so the later commit can overwrite the earlier one.
    """
    value = parse_amount(amount)
    if type_ not in TRANSACTION_TYPES:
        raise ValidationError(
            "type must be 'deposit' or 'withdrawal'",
            details={"field": "type", "allowed": list(TRANSACTION_TYPES)},
        )
    description = validate_optional_str(description, "description")

    account = await get_account(store, owner_id, account_id)
    if not account:
        raise NotFoundError("Account not found")

    updated = account.model_copy(update={"balance": apply_to_balance(account.balance, value, type_)})
    transaction = Transaction(
        id=store.new_id(),
        account_id=account.id,
        account_name=account.name,
        amount=value,
        type=type_,
        description=description,
    )
    audit = audit_entry(
        "transaction_applied",
        "account",
        account.id,
        {"transaction_id": transaction.id, "type": type_, "amount": str(value)},
    )
    audit.id = store.new_id()

    batch = store.batch()
    batch.set(owner_id, Account.collection, updated.id, updated.to_document())
    batch.set(owner_id, Transaction.collection, transaction.id, transaction.to_document())
    batch.set(owner_id, AuditLog.collection, audit.id, audit.to_document())
    await batch.commit()

    log.info(
        "transaction_applied",
        account_id=account.id,
        transaction_id=transaction.id,
        type=type_,
        amount=str(value),
        balance_after=str(updated.balance),
    )
    return updated, transaction


async def list_transactions(
    store: DocumentStore,
    owner_id: str,
    limit: int = DEFAULT_PAGE_SIZE,
    account_id: str | None = None,
) -> list[Transaction]:
    """Newest first."""
    docs = await store.list(
        owner_id,
        Transaction.collection,
        where={"account_id": account_id} if account_id else None,
        order_by="date",
        descending=True,
        limit=limit,
    )
    return [Transaction.from_document(d) for d in docs]


async def get_transaction(store: DocumentStore, owner_id: str, transaction_id: str) -> Transaction | None:
    doc = await store.get(owner_id, Transaction.collection, transaction_id)
    return Transaction.from_document(doc) if doc else None


async def delete_transaction(store: DocumentStore, owner_id: str, transaction_id: str) -> None:
    """Remove a history record only; the account balance is left as it is."""
    if not await get_transaction(store, owner_id, transaction_id):
        raise NotFoundError("Transaction not found")
    await store.delete(owner_id, Transaction.collection, transaction_id)
    log.info("transaction_deleted", transaction_id=transaction_id)
