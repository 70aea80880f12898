"""Cron: keep the rate snapshots in the shared cache fresh."""

import httpx

from app.cache.base import get_cache
from app.core.logging import get_logger
from app.services import rates as rates_service

log = get_logger(__name__)


async def run_refresh_rates(client: httpx.AsyncClient) -> dict[str, int]:
    """Fetch fiat and crypto rates and overwrite the cached snapshots the API serves."""
    counts = await rates_service.refresh_rates(get_cache(), client)
    log.info("refresh_rates_done", **counts)
    return counts
