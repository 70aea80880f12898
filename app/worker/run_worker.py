"""Run ARQ worker. Usage: python -m app.worker.run_worker"""

from arq import run_worker
from arq.cron import cron

from app.core.config import get_settings
from app.worker.tasks import get_redis_settings, refresh_rates, shutdown, startup


def _refresh_minutes() -> set[int]:
    step = max(1, get_settings().rates_refresh_seconds // 60)
    return set(range(0, 60, step))


class WorkerSettings:
    redis_settings = get_redis_settings()
    functions = [refresh_rates]
    cron_jobs = [
        cron(refresh_rates, minute=_refresh_minutes(), second=0, run_at_startup=True),  # every 5 minutes by default
    ]
    on_startup = startup
    on_shutdown = shutdown


if __name__ == "__main__":
    run_worker(WorkerSettings)
