"""Ephemeral key/value cache: guest data, one-time markers, rate snapshots."""

import json
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any

from app.core.config import get_settings


class EphemeralCache(ABC):
    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def add(self, key: str, value: str, ttl_seconds: int | None = None) -> bool:
        """Set ``key`` only if it is absent; True when this call set it."""
        ...

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def get_json(self, key: str, default: Any = None) -> Any:
        raw = await self.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    async def set_json(self, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        await self.set(key, json.dumps(value, default=str), ttl_seconds=ttl_seconds)

    async def close(self) -> None:
        pass


@lru_cache
def get_cache() -> EphemeralCache:
    settings = get_settings()
    if settings.cache_backend == "redis":
        from app.cache.redis import RedisCache
        return RedisCache(settings.redis_url)
    from app.cache.local import LocalCache
    return LocalCache()
