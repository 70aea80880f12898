import httpx

from app.core.config import get_settings


def create_http_client(transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Outbound client for third-party APIs; ``transport`` lets tests stub the network."""
    settings = get_settings()
    return httpx.AsyncClient(timeout=settings.http_timeout_seconds, transport=transport)
