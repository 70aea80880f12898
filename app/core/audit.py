"""Audit log for critical actions."""

from typing import Any

from app.models.audit_log import AuditLog
from app.store.base import DocumentStore


def audit_entry(
    event_type: str,
    entity_type: str,
    entity_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditLog:
    return AuditLog(
        event_type=event_type,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata=metadata or {},
    )


async def log_event(
    store: DocumentStore,
    owner_id: str,
    event_type: str,
    entity_type: str,
    entity_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> AuditLog:
    """Append to the owner's audit_logs collection."""
    entry = audit_entry(event_type, entity_type, entity_id, metadata)
    entry.id = store.new_id()
    await store.set(owner_id, AuditLog.collection, entry.id, entry.to_document())
    return entry
