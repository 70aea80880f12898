"""Public demo-request form: one notification email per client."""

import httpx

from app.cache.base import EphemeralCache
from app.core.config import get_settings
from app.core.exceptions import ConflictError, UpstreamError
from app.core.logging import get_logger
from app.core.validation import validate_email

log = get_logger(__name__)


def marker_key(client_id: str) -> str:
    return f"demo_request_sent:{client_id}"


async def has_requested(cache: EphemeralCache, client_id: str) -> bool:
    return await cache.exists(marker_key(client_id))


async def _send_emailjs(client: httpx.AsyncClient, from_email: str) -> None:
    settings = get_settings()
    if not settings.emailjs_service_id or not settings.emailjs_template_id or not settings.emailjs_public_key:
        raise UpstreamError("Email service not configured")
    body = {
        "service_id": settings.emailjs_service_id,
        "template_id": settings.emailjs_template_id,
        "user_id": settings.emailjs_public_key,
        "template_params": {
            "to_email": settings.demo_request_recipient,
            "from_email": from_email,
            "message": f"New demo request from {from_email}",
        },
    }
    if settings.emailjs_private_key:
        body["accessToken"] = settings.emailjs_private_key
    try:
        resp = await client.post(settings.emailjs_url, json=body)
        resp.raise_for_status()
    except httpx.HTTPError as e:
        log.warning("demo_request_send_failed", reason=str(e))
        raise UpstreamError("Failed to send request. Please try again.") from e


async def submit_demo_request(cache: EphemeralCache, client: httpx.AsyncClient, client_id: str, email: str) -> str:
    """Validate, send (or simulate outside production), then set the one-time marker."""
    email = validate_email(email)
    if await has_requested(cache, client_id):
        raise ConflictError("You have already requested a demo. Please contact support for assistance.")
    settings = get_settings()
    if settings.is_production:
        await _send_emailjs(client, email)
        log.info("demo_request_sent", recipient=settings.demo_request_recipient)
    else:
        log.info("demo_request_simulated", recipient=settings.demo_request_recipient, from_email=email)
    await cache.set(marker_key(client_id), "true")
    return email
