from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.validation import RawAmount
from app.deps import CurrentOwner, get_current_owner, store_dep
from app.models.debt import Debt
from app.services import debts as debts_service
from app.store.base import DocumentStore

router = APIRouter()


class DebtBody(BaseModel):
    name: str
    amount: RawAmount
    account_id: str | None = None


def debt_out(d: Debt) -> dict:
    return {"id": d.id, "name": d.name, "amount": str(d.amount), "account_id": d.account_id}


@router.get("")
async def debts_list(
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    items = await debts_service.list_debts(store, owner.owner_id)
    return {"debts": [debt_out(d) for d in items]}


@router.post("", status_code=201)
async def debt_create(
    body: DebtBody,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    d = await debts_service.create_debt(store, owner.owner_id, body.name, body.amount, body.account_id)
    return debt_out(d)


@router.put("/{debt_id}")
async def debt_update(
    debt_id: str,
    body: DebtBody,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    d = await debts_service.update_debt(
        store,
        owner.owner_id,
        Debt.model_construct(id=debt_id, name=body.name, amount=body.amount, account_id=body.account_id),
    )
    return debt_out(d)


@router.delete("/{debt_id}")
async def debt_delete(
    debt_id: str,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    await debts_service.delete_debt(store, owner.owner_id, debt_id)
    return {"status": "deleted"}
