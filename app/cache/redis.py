import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.cache.base import EphemeralCache
from app.core.exceptions import StoreError


class RedisCache(EphemeralCache):
    def __init__(self, url: str) -> None:
        self._redis = aioredis.from_url(url, decode_responses=True)

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            raise StoreError("Cache unavailable") from e

    async def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise StoreError("Cache unavailable") from e

    async def add(self, key: str, value: str, ttl_seconds: int | None = None) -> bool:
        try:
            return bool(await self._redis.set(key, value, ex=ttl_seconds, nx=True))
        except RedisError as e:
            raise StoreError("Cache unavailable") from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise StoreError("Cache unavailable") from e

    async def close(self) -> None:
        await self._redis.aclose()
