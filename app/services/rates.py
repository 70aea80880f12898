"""Reference rates from public APIs: fiat (dolarapi) and crypto spot prices (CoinGecko)."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import httpx
from pydantic import BaseModel

from app.cache.base import EphemeralCache
from app.core.config import get_settings
from app.core.exceptions import UpstreamError
from app.core.logging import get_logger

log = get_logger(__name__)

FIAT_CACHE_KEY = "rates:fiat"
CRYPTO_CACHE_KEY = "rates:crypto"

# (CoinGecko id, symbol, display name)
COINS = (
    ("bitcoin", "BTC", "Bitcoin"),
    ("ethereum", "ETH", "Ethereum"),
    ("binancecoin", "BNB", "BNB"),
)


class FiatRate(BaseModel):
    currency: str
    house: str
    name: str
    buy: Decimal | None = None
    sell: Decimal | None = None
    updated_at: str | None = None


class CryptoRate(BaseModel):
    symbol: str
    name: str
    price: Decimal
    change_24h: Decimal | None = None
    last_update: datetime


class RatesSnapshot(BaseModel):
    kind: str
    fetched_at: datetime
    rates: list[dict[str, Any]]


async def _get_json(client: httpx.AsyncClient, url: str, params: dict[str, str] | None = None) -> Any:
    try:
        resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPError as e:
        log.warning("rates_fetch_failed", url=url, reason=str(e))
        raise UpstreamError("Could not load rates", details={"url": url}) from e
    except ValueError as e:
        raise UpstreamError("Rates API returned invalid JSON", details={"url": url}) from e


async def fetch_fiat_rates(client: httpx.AsyncClient) -> list[FiatRate]:
    data = await _get_json(client, get_settings().fiat_rates_url)
    if not isinstance(data, list):
        raise UpstreamError("Unexpected fiat rates payload")
    return [
        FiatRate(
            currency=row.get("moneda", ""),
            house=row.get("casa", ""),
            name=row.get("nombre", ""),
            buy=row.get("compra"),
            sell=row.get("venta"),
            updated_at=row.get("fechaActualizacion"),
        )
        for row in data
        if isinstance(row, dict)
    ]


async def fetch_crypto_rates(client: httpx.AsyncClient) -> list[CryptoRate]:
    params = {
        "ids": ",".join(coin_id for coin_id, _, _ in COINS),
        "vs_currencies": "usd",
        "include_24hr_change": "true",
    }
    data = await _get_json(client, get_settings().crypto_rates_url, params=params)
    if not isinstance(data, dict):
        raise UpstreamError("Unexpected crypto rates payload")
    now = datetime.now(timezone.utc)
    out = []
    for coin_id, symbol, name in COINS:
        quote = data.get(coin_id)
        if not isinstance(quote, dict) or quote.get("usd") is None:
            log.warning("crypto_quote_missing", coin=coin_id)
            continue
        out.append(
            CryptoRate(
                symbol=symbol,
                name=name,
                price=quote["usd"],
                change_24h=quote.get("usd_24h_change"),
                last_update=now,
            )
        )
    return out


async def _store_snapshot(cache: EphemeralCache, key: str, kind: str, rates: list[BaseModel]) -> RatesSnapshot:
    snapshot = RatesSnapshot(
        kind=kind,
        fetched_at=datetime.now(timezone.utc),
        rates=[r.model_dump(mode="json") for r in rates],
    )
    await cache.set(key, snapshot.model_dump_json(), ttl_seconds=get_settings().rates_cache_ttl)
    return snapshot


async def _cached_snapshot(cache: EphemeralCache, key: str) -> RatesSnapshot | None:
    raw = await cache.get(key)
    return RatesSnapshot.model_validate_json(raw) if raw else None


async def refresh_rates(cache: EphemeralCache, client: httpx.AsyncClient) -> dict[str, int]:
    """Fetch both feeds and overwrite the cached snapshots. Used by the cron job."""
    fiat = await fetch_fiat_rates(client)
    crypto = await fetch_crypto_rates(client)
    await _store_snapshot(cache, FIAT_CACHE_KEY, "fiat", fiat)
    await _store_snapshot(cache, CRYPTO_CACHE_KEY, "crypto", crypto)
    log.info("rates_refreshed", fiat=len(fiat), crypto=len(crypto))
    return {"fiat": len(fiat), "crypto": len(crypto)}


async def get_fiat_rates(cache: EphemeralCache, client: httpx.AsyncClient) -> RatesSnapshot:
    snapshot = await _cached_snapshot(cache, FIAT_CACHE_KEY)
    if snapshot:
        return snapshot
    return await _store_snapshot(cache, FIAT_CACHE_KEY, "fiat", await fetch_fiat_rates(client))


async def get_crypto_rates(cache: EphemeralCache, client: httpx.AsyncClient) -> RatesSnapshot:
    snapshot = await _cached_snapshot(cache, CRYPTO_CACHE_KEY)
    if snapshot:
        return snapshot
    return await _store_snapshot(cache, CRYPTO_CACHE_KEY, "crypto", await fetch_crypto_rates(client))


async def cached_crypto_prices(cache: EphemeralCache) -> dict[str, Decimal]:
    """Symbol -> USD price from the last cached snapshot; empty if nothing is cached."""
    snapshot = await _cached_snapshot(cache, CRYPTO_CACHE_KEY)
    if not snapshot:
        return {}
    return {r["symbol"]: Decimal(str(r["price"])) for r in snapshot.rates}
