import httpx
from fastapi import APIRouter, Depends

from app.cache.base import EphemeralCache
from app.deps import cache_dep, http_client_dep
from app.services import rates as rates_service

router = APIRouter()


@router.get("/fiat")
async def rates_fiat(
    cache: EphemeralCache = Depends(cache_dep),
    client: httpx.AsyncClient = Depends(http_client_dep),
):
    """Dollar quotes (buy/sell per exchange house); refreshed by the worker every 5 minutes."""
    snapshot = await rates_service.get_fiat_rates(cache, client)
    return snapshot.model_dump(mode="json")


@router.get("/crypto")
async def rates_crypto(
    cache: EphemeralCache = Depends(cache_dep),
    client: httpx.AsyncClient = Depends(http_client_dep),
):
    """BTC/ETH/BNB spot prices in USD with 24h change."""
    snapshot = await rates_service.get_crypto_rates(cache, client)
    return snapshot.model_dump(mode="json")
