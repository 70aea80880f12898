from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from app.cache.base import EphemeralCache
from app.core.config import get_settings
from app.core.security import create_session_cookie
from app.core.validation import validate_email
from app.deps import (
    SESSION_COOKIE_NAME,
    CurrentOwner,
    cache_dep,
    get_client_id,
    get_current_owner,
    identity_dep,
    read_session,
    set_session_cookie,
    store_dep,
)
from app.identity.base import IdentityProvider, IdentityUser
from app.services import users as user_service
from app.services.migration import is_migrating
from app.store.base import DocumentStore

router = APIRouter()


class CredentialsRequest(BaseModel):
    email: str
    password: str


class PasswordResetRequest(BaseModel):
    email: str


async def _establish_session(
    identity: IdentityUser,
    response: Response,
    store: DocumentStore,
    cache: EphemeralCache,
    client_id: str,
) -> dict:
    profile = await user_service.upsert_profile(store, identity)
    set_session_cookie(
        response,
        create_session_cookie(user_service.session_payload(profile)),
        secure=get_settings().is_production,
    )
    migration = await user_service.run_first_login_migration(store, cache, profile.id, client_id)
    return {
        "user": {"id": profile.id, "email": profile.email},
        "migration": migration,
    }


@router.post("/sign-up")
async def auth_sign_up(
    body: CredentialsRequest,
    response: Response,
    store: DocumentStore = Depends(store_dep),
    cache: EphemeralCache = Depends(cache_dep),
    identity: IdentityProvider = Depends(identity_dep),
    client_id: str = Depends(get_client_id),
):
    """Create an account with the identity provider, open a session, migrate guest data."""
    user = await identity.sign_up(validate_email(body.email), body.password)
    return await _establish_session(user, response, store, cache, client_id)


@router.post("/sign-in")
async def auth_sign_in(
    body: CredentialsRequest,
    response: Response,
    store: DocumentStore = Depends(store_dep),
    cache: EphemeralCache = Depends(cache_dep),
    identity: IdentityProvider = Depends(identity_dep),
    client_id: str = Depends(get_client_id),
):
    """Email/password sign-in; sets httpOnly session cookie."""
    user = await identity.sign_in(validate_email(body.email), body.password)
    return await _establish_session(user, response, store, cache, client_id)


@router.post("/sign-out")
async def auth_sign_out(
    response: Response,
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
):
    await user_service.invalidate_sessions(store, owner.owner_id)
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"status": "signed_out"}


@router.post("/password-reset")
async def auth_password_reset(
    body: PasswordResetRequest,
    identity: IdentityProvider = Depends(identity_dep),
):
    await identity.send_password_reset(validate_email(body.email))
    return {"status": "sent"}


@router.get("/session")
async def auth_session(request: Request, store: DocumentStore = Depends(store_dep)):
    """Session tri-state: established, loading (first-login migration running) or none."""
    payload = read_session(request)
    owner_id = payload.get("owner_id") if payload else None
    profile = await user_service.get_profile(store, owner_id) if owner_id else None
    if not profile or payload.get("session_version") != profile.session_version:
        return {"state": "none", "user": None}
    state = "loading" if is_migrating(profile.id) else "established"
    return {"state": state, "user": {"id": profile.id, "email": profile.email}}


@router.get("/me")
async def auth_me(owner: CurrentOwner = Depends(get_current_owner)):
    """Return current owner. Requires session cookie."""
    return {"id": owner.owner_id, "email": owner.email}
