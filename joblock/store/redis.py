"""
Redis-backed lock store.

Maps the lock store primitives onto single Redis commands:
- set_if_absent -> SET key value NX [EX ttl]
- expire        -> EXPIRE key seconds
- delete        -> DEL key
- exists        -> EXISTS key

Connection and protocol errors from redis-py are not caught here; they
reach the caller unchanged.
"""

import logging

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class RedisLockStore:
    """
    Lock store backed by a shared Redis instance.

    Usage:
        store = RedisLockStore.from_url("redis://localhost:6379/0")
        if await store.set_if_absent("lock:report-[1]", "true"):
            ...
        await store.delete("lock:report-[1]")
        await store.close()
    """

    def __init__(self, client: aioredis.Redis):
        """
        Initialize the store.

        Args:
            client: An asyncio Redis client. The store does not own its
                lifecycle unless created with ``from_url``.
        """
        self._client = client
        self._owns_client = False

    @classmethod
    def from_url(cls, redis_url: str) -> "RedisLockStore":
        """
        Create a store with its own client.

        Args:
            redis_url: Redis connection URL.

        Returns:
            A store that closes its client on ``close()``.
        """
        store = cls(aioredis.from_url(redis_url, decode_responses=True))
        store._owns_client = True
        return store

    @property
    def client(self) -> aioredis.Redis:
        return self._client

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
    ) -> bool:
        if ttl_seconds == 0:
            # SET rejects EX 0; EXPIRE 0 removes the key like the two-step path
            granted = bool(await self._client.set(key, value, nx=True))
            if granted:
                await self._client.expire(key, 0)
            return granted

        # SET NX replies None when the key already exists
        result = await self._client.set(key, value, nx=True, ex=ttl_seconds)
        return bool(result)

    async def expire(self, key: str, seconds: int) -> bool:
        return bool(await self._client.expire(key, seconds))

    async def delete(self, key: str) -> int:
        return int(await self._client.delete(key))

    async def exists(self, key: str) -> bool:
        return bool(await self._client.exists(key))

    async def close(self) -> None:
        """Close the underlying client if this store created it."""
        if self._owns_client:
            await self._client.aclose()
            logger.debug("Redis lock store connection closed")
