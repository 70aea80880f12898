"""Guest ledger: accounts and debts kept before sign-in, migrated on first login."""

from fastapi import APIRouter, Depends

from app.cache.base import EphemeralCache
from app.deps import cache_dep, get_client_id
from app.models.account import Account
from app.models.debt import Debt
from app.routers.accounts import AccountCreate, AccountUpdate, account_out
from app.routers.debts import DebtBody, debt_out
from app.services import guest as guest_service

router = APIRouter()


@router.get("/accounts")
async def guest_accounts_list(
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    items = await guest_service.load_accounts(cache, client_id)
    return {"accounts": [account_out(a) for a in items]}


@router.post("/accounts", status_code=201)
async def guest_account_create(
    body: AccountCreate,
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    a = await guest_service.create_account(cache, client_id, body.name, body.balance)
    return account_out(a)


@router.put("/accounts/{account_id}")
async def guest_account_update(
    account_id: str,
    body: AccountUpdate,
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    a = await guest_service.update_account(
        cache,
        client_id,
        Account.model_construct(id=account_id, name=body.name, balance=body.balance),
    )
    return account_out(a)


@router.delete("/accounts/{account_id}")
async def guest_account_delete(
    account_id: str,
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    await guest_service.delete_account(cache, client_id, account_id)
    return {"status": "deleted"}


@router.get("/debts")
async def guest_debts_list(
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    items = await guest_service.load_debts(cache, client_id)
    return {"debts": [debt_out(d) for d in items]}


@router.post("/debts", status_code=201)
async def guest_debt_create(
    body: DebtBody,
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    d = await guest_service.create_debt(cache, client_id, body.name, body.amount, body.account_id)
    return debt_out(d)


@router.put("/debts/{debt_id}")
async def guest_debt_update(
    debt_id: str,
    body: DebtBody,
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    d = await guest_service.update_debt(
        cache,
        client_id,
        Debt.model_construct(id=debt_id, name=body.name, amount=body.amount, account_id=body.account_id),
    )
    return debt_out(d)


@router.delete("/debts/{debt_id}")
async def guest_debt_delete(
    debt_id: str,
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    await guest_service.delete_debt(cache, client_id, debt_id)
    return {"status": "deleted"}
