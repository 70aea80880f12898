"""Dead-letter: failed ARQ jobs for inspection."""

from datetime import datetime
from typing import Any

from pydantic import Field

from app.models.base import StoredModel, utcnow

SYSTEM_OWNER = "_system"


class FailedJob(StoredModel):
    job_name: str
    job_id: str
    args: list[Any] = Field(default_factory=list)
    kwargs: dict[str, Any] = Field(default_factory=dict)
    reason: str = ""
    retries: int = 0
    created_at: datetime = Field(default_factory=utcnow)

    collection = "failed_jobs"
    indexes = [[("job_name", 1)], [("created_at", -1)]]
