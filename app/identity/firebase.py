"""Firebase Authentication through the Identity Toolkit REST API."""

from typing import Any

import httpx

from app.core.exceptions import AppError, ConflictError, UnauthorizedError, UpstreamError, ValidationError
from app.core.http import create_http_client
from app.core.logging import get_logger
from app.identity.base import IdentityProvider, IdentityUser

log = get_logger(__name__)

_AUTH_ERRORS = {
    "EMAIL_EXISTS": lambda: ConflictError("Email already in use"),
    "EMAIL_NOT_FOUND": lambda: UnauthorizedError("Invalid email or password"),
    "INVALID_PASSWORD": lambda: UnauthorizedError("Invalid email or password"),
    "INVALID_LOGIN_CREDENTIALS": lambda: UnauthorizedError("Invalid email or password"),
    "USER_DISABLED": lambda: UnauthorizedError("Account disabled"),
    "INVALID_EMAIL": lambda: ValidationError("Please enter a valid email address", details={"field": "email"}),
    "MISSING_PASSWORD": lambda: ValidationError("Password is required", details={"field": "password"}),
}


def map_firebase_error(message: str) -> AppError:
    # Messages look like "WEAK_PASSWORD : Password should be at least 6 characters"
    code = message.split(":", 1)[0].strip()
    if code.startswith("WEAK_PASSWORD"):
        return ValidationError("Password is too weak", details={"field": "password"})
    factory = _AUTH_ERRORS.get(code)
    if factory:
        return factory()
    return UpstreamError("Identity provider error", details={"provider_code": code})


class FirebaseIdentityProvider(IdentityProvider):
    def __init__(self, api_key: str, base_url: str, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    async def _call(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        if not self._api_key:
            raise UpstreamError("Identity provider not configured")
        url = f"{self._base_url}/accounts:{method}"
        try:
            async with create_http_client(self._transport) as client:
                resp = await client.post(url, params={"key": self._api_key}, json=body)
        except httpx.HTTPError as e:
            log.warning("identity_request_failed", method=method, reason=str(e))
            raise UpstreamError("Identity provider unreachable") from e
        try:
            data = resp.json() if resp.content else {}
        except ValueError:
            data = {}
        if resp.status_code >= 400:
            message = (data.get("error") or {}).get("message", "") if isinstance(data, dict) else ""
            raise map_firebase_error(message)
        return data

    async def sign_up(self, email: str, password: str) -> IdentityUser:
        data = await self._call("signUp", {"email": email, "password": password, "returnSecureToken": True})
        return IdentityUser(uid=data["localId"], email=data.get("email", email))

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        data = await self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return IdentityUser(uid=data["localId"], email=data.get("email", email))

    async def send_password_reset(self, email: str) -> None:
        await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})
