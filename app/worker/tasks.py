"""ARQ job definitions."""

import uuid
from typing import Any

from arq.connections import RedisSettings

from app.core.config import get_settings
from app.core.http import create_http_client
from app.core.logging import configure_logging, get_logger
from app.models.failed_job import SYSTEM_OWNER, FailedJob
from app.store.base import get_store

log = get_logger(__name__)


async def _run_with_dlq(
    job_name: str,
    job_id: str | None,
    args: list[Any],
    kwargs: dict[str, Any],
    coro,
) -> Any:
    """Run coroutine; on exception persist to FailedJob then re-raise."""
    try:
        return await coro
    except Exception as e:
        fid = job_id or str(uuid.uuid4())
        failed = FailedJob(
            job_name=job_name,
            job_id=fid,
            args=args,
            kwargs=kwargs,
            reason=str(e)[:2000],
            retries=0,
        )
        store = get_store()
        await store.set(SYSTEM_OWNER, FailedJob.collection, store.new_id(), failed.to_document())
        log.exception("job_failed", job=job_name, job_id=fid, reason=str(e))
        raise


async def refresh_rates(ctx: dict[str, Any]) -> dict[str, int]:
    """Cron job: refresh cached fiat and crypto rates."""
    job_id = ctx.get("job_id") if isinstance(ctx.get("job_id"), str) else None
    from app.worker.cron import run_refresh_rates
    return await _run_with_dlq("refresh_rates", job_id, [], {}, run_refresh_rates(ctx["http_client"]))


async def startup(ctx: dict) -> None:
    from app.db.init import init_db
    configure_logging(debug=get_settings().debug, component="worker")
    await init_db()
    ctx["http_client"] = create_http_client()


async def shutdown(ctx: dict) -> None:
    client = ctx.get("http_client")
    if client is not None:
        await client.aclose()


def get_redis_settings() -> RedisSettings:
    return RedisSettings.from_dsn(get_settings().redis_url)
