"""
In-memory lock store.
"""

import time
from collections.abc import Callable


class InMemoryLockStore:
    """
    In-memory reference implementation of LockStore.

    Used for:
    - Tests
    - Local experiments
    - Single-process deployments

    Expiry is applied lazily against ``clock`` whenever a key is touched.
    Every operation completes without yielding to the event loop, so
    operations are atomic with respect to other coroutines. NOT shared
    across processes.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._values: dict[str, str] = {}
        self._expires_at: dict[str, float] = {}

    def _purge_if_expired(self, key: str) -> None:
        deadline = self._expires_at.get(key)
        if deadline is not None and self._clock() >= deadline:
            self._values.pop(key, None)
            self._expires_at.pop(key, None)

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
    ) -> bool:
        self._purge_if_expired(key)
        if key in self._values:
            return False

        self._values[key] = value
        if ttl_seconds is not None:
            self._expires_at[key] = self._clock() + ttl_seconds
        return True

    async def expire(self, key: str, seconds: int) -> bool:
        self._purge_if_expired(key)
        if key not in self._values:
            return False

        self._expires_at[key] = self._clock() + seconds
        # Mirror Redis: a non-positive expiry removes the key right away
        self._purge_if_expired(key)
        return True

    async def delete(self, key: str) -> int:
        self._purge_if_expired(key)
        self._expires_at.pop(key, None)
        return 1 if self._values.pop(key, None) is not None else 0

    async def exists(self, key: str) -> bool:
        self._purge_if_expired(key)
        return key in self._values

    def ttl(self, key: str) -> float | None:
        """Seconds until ``key`` expires, or None if absent or unbounded."""
        self._purge_if_expired(key)
        deadline = self._expires_at.get(key)
        if deadline is None:
            return None
        return max(0.0, deadline - self._clock())

    def keys(self) -> list[str]:
        """List keys currently held."""
        for key in list(self._values):
            self._purge_if_expired(key)
        return list(self._values)
