from datetime import datetime
from typing import Any

from pydantic import Field

from app.models.base import StoredModel, utcnow


class AuditLog(StoredModel):
    event_type: str
    entity_type: str
    entity_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utcnow)

    collection = "audit_logs"
    indexes = [
        [("created_at", -1)],
        [("entity_type", 1), ("entity_id", 1)],
    ]
