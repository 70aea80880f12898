from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.validation import RawAmount
from app.deps import CurrentOwner, get_current_owner, store_dep
from app.models.monthly_expense import MonthlyExpense
from app.services import monthly_expenses as expenses_service
from app.services.dashboard import expense_totals
from app.store.base import DocumentStore

router = APIRouter()


class ExpenseCreate(BaseModel):
    description: str
    amount: RawAmount


class ExpenseUpdate(BaseModel):
    description: str | None = None
    amount: RawAmount | None = None
    is_paid: bool | None = None


def expense_out(e: MonthlyExpense) -> dict:
    return {
        "id": e.id,
        "description": e.description,
        "amount": str(e.amount),
        "date": e.date.isoformat(),
        "is_paid": e.is_paid,
    }


@router.get("")
async def expenses_list(
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    items = await expenses_service.list_expenses(store, owner.owner_id)
    totals = expense_totals(items)
    return {
        "expenses": [expense_out(e) for e in items],
        "totals": {"total": str(totals.total), "paid": str(totals.paid), "pending": str(totals.pending)},
    }


@router.post("", status_code=201)
async def expense_create(
    body: ExpenseCreate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    e = await expenses_service.create_expense(store, owner.owner_id, body.description, body.amount)
    return expense_out(e)


@router.put("/{expense_id}")
async def expense_update(
    expense_id: str,
    body: ExpenseUpdate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    e = await expenses_service.update_expense(
        store,
        owner.owner_id,
        expense_id,
        description=body.description,
        amount=body.amount,
        is_paid=body.is_paid,
    )
    return expense_out(e)


@router.post("/{expense_id}/toggle-paid")
async def expense_toggle_paid(
    expense_id: str,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    e = await expenses_service.toggle_paid(store, owner.owner_id, expense_id)
    return expense_out(e)


@router.delete("/{expense_id}")
async def expense_delete(
    expense_id: str,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    await expenses_service.delete_expense(store, owner.owner_id, expense_id)
    return {"status": "deleted"}
