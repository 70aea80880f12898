from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.validation import RawAmount
from app.deps import CurrentOwner, get_current_owner, store_dep
from app.models.account import Account
from app.services import accounts as accounts_service
from app.store.base import DocumentStore

router = APIRouter()


class AccountCreate(BaseModel):
    name: str
    balance: RawAmount = 0


class AccountUpdate(BaseModel):
    name: str
    balance: RawAmount


def account_out(a: Account) -> dict:
    return {"id": a.id, "name": a.name, "balance": str(a.balance)}


@router.get("")
async def accounts_list(
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    items = await accounts_service.list_accounts(store, owner.owner_id)
    return {"accounts": [account_out(a) for a in items]}


@router.post("", status_code=201)
async def account_create(
    body: AccountCreate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    a = await accounts_service.create_account(store, owner.owner_id, body.name, body.balance)
    return account_out(a)


@router.put("/{account_id}")
async def account_update(
    account_id: str,
    body: AccountUpdate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    """Direct edit of name/balance; records no transaction."""
    a = await accounts_service.update_account(
        store,
        owner.owner_id,
        Account.model_construct(id=account_id, name=body.name, balance=body.balance),
    )
    return account_out(a)


@router.delete("/{account_id}")
async def account_delete(
    account_id: str,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    """Fails with 409 while any debt still references the account."""
    await accounts_service.delete_account(store, owner.owner_id, account_id)
    return {"status": "deleted"}
