from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.core.config import get_settings
from app.core.validation import RawAmount
from app.deps import CurrentOwner, get_current_owner, store_dep
from app.models.transaction import Transaction
from app.routers.accounts import account_out
from app.services import transactions as transactions_service
from app.store.base import DocumentStore

router = APIRouter()


class TransactionCreate(BaseModel):
    account_id: str
    amount: RawAmount
    type: str
    description: str | None = None


def transaction_out(t: Transaction) -> dict:
    return {
        "id": t.id,
        "account_id": t.account_id,
        "account_name": t.account_name,
        "amount": str(t.amount),
        "type": t.type,
        "date": t.date.isoformat(),
        "description": t.description,
    }


@router.post("", status_code=201)
async def transaction_create(
    body: TransactionCreate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    """Deposit into or withdraw from an account; balance and history are written atomically."""
    account, transaction = await transactions_service.apply_transaction(
        store,
        owner.owner_id,
        body.account_id,
        body.amount,
        body.type,
        body.description,
    )
    return {"account": account_out(account), "transaction": transaction_out(transaction)}


@router.get("")
async def transactions_list(
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
    limit: int | None = Query(None, ge=1, le=200),
    account_id: str | None = None,
):
    """Return transactions for current owner (newest first)."""
    limit = limit or get_settings().transactions_page_size
    items = await transactions_service.list_transactions(store, owner.owner_id, limit=limit, account_id=account_id)
    return {"transactions": [transaction_out(t) for t in items], "limit": limit}


@router.delete("/{transaction_id}")
async def transaction_delete(
    transaction_id: str,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    """History cleanup only; the account balance is not touched."""
    await transactions_service.delete_transaction(store, owner.owner_id, transaction_id)
    return {"status": "deleted"}
