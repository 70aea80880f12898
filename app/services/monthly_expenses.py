"""Monthly expenses: independent of accounts and debts."""

from decimal import Decimal

from app.core.exceptions import NotFoundError
from app.core.logging import get_logger
from app.core.validation import parse_amount, validate_required_str
from app.models.monthly_expense import MonthlyExpense
from app.store.base import DocumentStore

log = get_logger(__name__)


async def list_expenses(store: DocumentStore, owner_id: str) -> list[MonthlyExpense]:
    docs = await store.list(owner_id, MonthlyExpense.collection, order_by="date", descending=True)
    return [MonthlyExpense.from_document(d) for d in docs]


async def get_expense(store: DocumentStore, owner_id: str, expense_id: str) -> MonthlyExpense | None:
    doc = await store.get(owner_id, MonthlyExpense.collection, expense_id)
    return MonthlyExpense.from_document(doc) if doc else None


async def create_expense(
    store: DocumentStore,
    owner_id: str,
    description: str,
    amount: Decimal | str | float | int,
) -> MonthlyExpense:
    expense = MonthlyExpense(
        id=store.new_id(),
        description=validate_required_str(description, "description"),
        amount=parse_amount(amount),
    )
    await store.set(owner_id, MonthlyExpense.collection, expense.id, expense.to_document())
    log.info("expense_created", expense_id=expense.id)
    return expense


async def update_expense(
    store: DocumentStore,
    owner_id: str,
    expense_id: str,
    description: str | None = None,
    amount: Decimal | str | float | int | None = None,
    is_paid: bool | None = None,
) -> MonthlyExpense:
    expense = await get_expense(store, owner_id, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")
    if description is not None:
        expense.description = validate_required_str(description, "description")
    if amount is not None:
        expense.amount = parse_amount(amount)
    if is_paid is not None:
        expense.is_paid = is_paid
    await store.set(owner_id, MonthlyExpense.collection, expense_id, expense.to_document())
    return expense


async def toggle_paid(store: DocumentStore, owner_id: str, expense_id: str) -> MonthlyExpense:
    expense = await get_expense(store, owner_id, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")
    expense.is_paid = not expense.is_paid
    await store.set(owner_id, MonthlyExpense.collection, expense_id, expense.to_document())
    log.info("expense_toggled", expense_id=expense_id, is_paid=expense.is_paid)
    return expense


async def delete_expense(store: DocumentStore, owner_id: str, expense_id: str) -> None:
    if not await get_expense(store, owner_id, expense_id):
        raise NotFoundError("Expense not found")
    await store.delete(owner_id, MonthlyExpense.collection, expense_id)
