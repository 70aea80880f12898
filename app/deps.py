"""Shared FastAPI dependencies."""

from typing import AsyncGenerator

import httpx
from fastapi import Depends, Request, Response
from pydantic import BaseModel

from app.cache.base import EphemeralCache, get_cache
from app.core.exceptions import UnauthorizedError
from app.core.http import create_http_client
from app.core.logging import bind_owner_id
from app.core.security import SESSION_MAX_AGE, generate_client_id, load_session_cookie
from app.identity.base import IdentityProvider, get_identity_provider
from app.services import users as user_service
from app.store.base import DocumentStore, get_store

SESSION_COOKIE_NAME = "global_pocket_session"
CLIENT_COOKIE_NAME = "global_pocket_client"
CLIENT_COOKIE_MAX_AGE = 365 * 24 * 3600


class CurrentOwner(BaseModel):
    owner_id: str
    email: str


def store_dep() -> DocumentStore:
    return get_store()


def cache_dep() -> EphemeralCache:
    return get_cache()


def identity_dep() -> IdentityProvider:
    return get_identity_provider()


async def http_client_dep() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with create_http_client() as client:
        yield client


def read_session(request: Request) -> dict | None:
    cookie = request.cookies.get(SESSION_COOKIE_NAME)
    if not cookie:
        return None
    return load_session_cookie(cookie)


async def get_current_owner(
    request: Request,
    store: DocumentStore = Depends(store_dep),
) -> CurrentOwner:
    """Dependency: load session from cookie and return the owner every store call is scoped to."""
    payload = read_session(request)
    if payload is None:
        if request.cookies.get(SESSION_COOKIE_NAME):
            raise UnauthorizedError("Invalid or expired session")
        raise UnauthorizedError("Not authenticated")
    owner_id = payload.get("owner_id")
    if not owner_id:
        raise UnauthorizedError("Invalid session")
    profile = await user_service.get_profile(store, owner_id)
    if not profile:
        raise UnauthorizedError("User not found")
    if payload.get("session_version") != profile.session_version:
        raise UnauthorizedError("Session invalidated")
    bind_owner_id(owner_id)
    return CurrentOwner(owner_id=owner_id, email=profile.email)


def get_client_id(request: Request, response: Response) -> str:
    """Dependency: stable id for this browser, issued on first use; keys guest data and one-time markers."""
    client_id = request.cookies.get(CLIENT_COOKIE_NAME)
    if client_id:
        return client_id
    client_id = generate_client_id()
    response.set_cookie(
        key=CLIENT_COOKIE_NAME,
        value=client_id,
        max_age=CLIENT_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return client_id


def set_session_cookie(response: Response, value: str, secure: bool = False) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=value,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )
