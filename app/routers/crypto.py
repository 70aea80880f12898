from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.cache.base import EphemeralCache
from app.core.validation import RawAmount
from app.deps import CurrentOwner, cache_dep, get_current_owner, store_dep
from app.models.crypto_holding import CryptoHolding
from app.services import crypto as crypto_service
from app.services.dashboard import holdings_value
from app.services.rates import cached_crypto_prices
from app.store.base import DocumentStore

router = APIRouter()


class HoldingCreate(BaseModel):
    symbol: str
    amount: RawAmount


class HoldingUpdate(BaseModel):
    amount: RawAmount


def holding_out(h: CryptoHolding) -> dict:
    return {"id": h.id, "symbol": h.symbol, "amount": str(h.amount)}


@router.get("/holdings")
async def holdings_list(
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
    cache: EphemeralCache = Depends(cache_dep),
):
    """Holdings plus their USD value at the last cached prices (null when no prices are cached)."""
    items = await crypto_service.list_holdings(store, owner.owner_id)
    prices = await cached_crypto_prices(cache)
    return {
        "holdings": [holding_out(h) for h in items],
        "total_value_usd": str(holdings_value(items, prices)) if prices else None,
    }


@router.post("/holdings", status_code=201)
async def holding_add(
    body: HoldingCreate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    h = await crypto_service.add_holding(store, owner.owner_id, body.symbol, body.amount)
    return holding_out(h)


@router.put("/holdings/{holding_id}")
async def holding_update(
    holding_id: str,
    body: HoldingUpdate,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    h = await crypto_service.update_holding(store, owner.owner_id, holding_id, body.amount)
    return holding_out(h)


@router.delete("/holdings/{holding_id}")
async def holding_delete(
    holding_id: str,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    await crypto_service.delete_holding(store, owner.owner_id, holding_id)
    return {"status": "deleted"}
