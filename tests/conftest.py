import os
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# In-process backends for every test run
os.environ.setdefault("ENV", "test")
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("CACHE_BACKEND", "memory")
os.environ.setdefault("IDENTITY_BACKEND", "local")
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")

FIAT_PAYLOAD = [
    {
        "moneda": "USD",
        "casa": "oficial",
        "nombre": "Oficial",
        "compra": 1010.5,
        "venta": 1050.5,
        "fechaActualizacion": "2026-10-19T12:00:00.000Z",
    },
    {
        "moneda": "USD",
        "casa": "blue",
        "nombre": "Blue",
        "compra": 1200,
        "venta": 1220,
        "fechaActualizacion": "2026-10-19T12:00:00.000Z",
    },
]

CRYPTO_PAYLOAD = {
    "bitcoin": {"usd": 60000, "usd_24h_change": 1.5},
    "ethereum": {"usd": 3000, "usd_24h_change": -0.75},
    "binancecoin": {"usd": 500, "usd_24h_change": 0.1},
}


def rates_handler(request: httpx.Request) -> httpx.Response:
    if "dolarapi" in request.url.host:
        return httpx.Response(200, json=FIAT_PAYLOAD)
    if "coingecko" in request.url.host:
        return httpx.Response(200, json=CRYPTO_PAYLOAD)
    if "emailjs" in request.url.host:
        return httpx.Response(200, text="OK")
    return httpx.Response(404)


@pytest.fixture
def store():
    from app.store.memory import MemoryStore
    return MemoryStore()


@pytest.fixture
def cache():
    from app.cache.local import LocalCache
    return LocalCache()


@pytest.fixture
def identity():
    from app.identity.local import LocalIdentityProvider
    return LocalIdentityProvider()


@pytest_asyncio.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(rates_handler)) as c:
        yield c


@pytest_asyncio.fixture
async def client(store, cache, identity, http_client) -> AsyncGenerator[AsyncClient, None]:
    from app.deps import cache_dep, http_client_dep, identity_dep, store_dep
    from app.main import app

    async def _http_client():
        yield http_client

    app.dependency_overrides[store_dep] = lambda: store
    app.dependency_overrides[cache_dep] = lambda: cache
    app.dependency_overrides[identity_dep] = lambda: identity
    app.dependency_overrides[http_client_dep] = _http_client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def signed_in(client: AsyncClient) -> AsyncClient:
    r = await client.post("/v1/auth/sign-up", json={"email": "owner@example.com", "password": "s3cret-pass"})
    assert r.status_code == 200, r.text
    return client
