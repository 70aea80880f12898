"""Owner profiles and session establishment on top of the identity provider."""

from typing import Any

from app.cache.base import EphemeralCache
from app.core.audit import log_event
from app.core.logging import get_logger
from app.identity.base import IdentityUser
from app.models.base import utcnow
from app.models.profile import Profile
from app.services.migration import MigrationResult, migrate_local_data
from app.store.base import DocumentStore

log = get_logger(__name__)


async def get_profile(store: DocumentStore, owner_id: str) -> Profile | None:
    doc = await store.get(owner_id, Profile.collection, owner_id)
    return Profile.from_document(doc) if doc else None


async def upsert_profile(store: DocumentStore, identity: IdentityUser) -> Profile:
    profile = await get_profile(store, identity.uid)
    if profile:
        profile.email = identity.email
        profile.last_login_at = utcnow()
        event = "user_login"
    else:
        profile = Profile(id=identity.uid, email=identity.email, last_login_at=utcnow())
        event = "user_created"
    await store.set(identity.uid, Profile.collection, identity.uid, profile.to_document())
    log.info(event, owner_id=identity.uid)
    await log_event(store, identity.uid, event, "profile", identity.uid, {"email": identity.email})
    return profile


def session_payload(profile: Profile) -> dict[str, Any]:
    return {"owner_id": profile.id, "email": profile.email, "session_version": profile.session_version}


async def invalidate_sessions(store: DocumentStore, owner_id: str) -> None:
    """Sign-out: every cookie issued before this call stops validating."""
    profile = await get_profile(store, owner_id)
    if not profile:
        return
    profile.session_version += 1
    await store.set(owner_id, Profile.collection, owner_id, profile.to_document())
    log.info("user_logout", owner_id=owner_id)


async def run_first_login_migration(
    store: DocumentStore,
    cache: EphemeralCache,
    owner_id: str,
    guest_id: str | None,
) -> dict[str, Any]:
    """Never fails the login: a failed migration is logged, reported, and retried next login."""
    try:
        result: MigrationResult = await migrate_local_data(store, cache, owner_id, guest_id)
    except Exception as e:
        log.exception("migration_failed", owner_id=owner_id)
        return {"status": "failed", "message": "Error migrating data", "reason": str(e)[:200]}
    return result.model_dump()
