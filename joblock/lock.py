"""
Lock protocol: acquire on submission, release on completion.

Acquire never waits. Contention is resolved by denying the caller
outright, and a denial is a normal outcome rather than an error.
"""

import logging

from joblock.constants import DEFAULT_LOCK_SENTINEL, SPAN_ACQUIRE_LOCK, SPAN_RELEASE_LOCK
from joblock.observability.tracing import get_tracer
from joblock.store.base import LockStore

logger = logging.getLogger(__name__)


class JobLock:
    """
    Non-blocking deduplication lock over a shared key-value store.

    Features:
    - Atomic set-if-absent acquire, no retries or waiting
    - Optional TTL so a crashed holder's lock eventually clears
    - Idempotent release

    With ``atomic_expiry`` disabled (the default), a finite TTL is applied
    by a second EXPIRE call after the key is set. A crash between the two
    calls leaves a lock without expiry. Enabling ``atomic_expiry`` sets the
    key and its TTL in one store call instead.
    """

    def __init__(
        self,
        store: LockStore,
        sentinel: str = DEFAULT_LOCK_SENTINEL,
        atomic_expiry: bool = False,
    ):
        """
        Initialize the lock.

        Args:
            store: Shared store holding lock records.
            sentinel: Value written for a held lock. Never read back.
            atomic_expiry: Apply the TTL in the same call as the set.
        """
        self._store = store
        self._sentinel = sentinel
        self._atomic_expiry = atomic_expiry

    @property
    def store(self) -> LockStore:
        return self._store

    async def acquire(self, key: str, ttl: int | None = None) -> bool:
        """
        Try to acquire the lock for ``key``.

        Args:
            key: The lock key.
            ttl: Seconds until the record expires, or None for no expiry.

        Returns:
            True if the lock was granted, False if it is already held.

        Raises:
            ValueError: If ``ttl`` is negative.
        """
        if ttl is not None and ttl < 0:
            raise ValueError(f"Lock TTL must be non-negative, got {ttl}")

        with get_tracer().start_as_current_span(SPAN_ACQUIRE_LOCK) as span:
            span.set_attribute("lock.key", key)
            if ttl is not None:
                span.set_attribute("lock.ttl", ttl)

            if self._atomic_expiry:
                granted = await self._store.set_if_absent(key, self._sentinel, ttl)
            else:
                granted = await self._store.set_if_absent(key, self._sentinel)
                if granted and ttl is not None:
                    await self._store.expire(key, ttl)

            span.set_attribute("lock.granted", granted)

        if granted:
            logger.info("Lock acquired", extra={"lock_key": key, "ttl": ttl})
        else:
            logger.debug("Lock held elsewhere", extra={"lock_key": key})

        return granted

    async def release(self, key: str) -> None:
        """
        Release the lock for ``key``.

        Releasing a key that is absent (never acquired, already released
        or expired) is not an error. Store failures propagate.
        """
        with get_tracer().start_as_current_span(SPAN_RELEASE_LOCK) as span:
            span.set_attribute("lock.key", key)
            removed = await self._store.delete(key)
            span.set_attribute("lock.removed", removed)

        if removed:
            logger.info("Lock released", extra={"lock_key": key})
        else:
            logger.debug("Lock already absent on release", extra={"lock_key": key})

    async def is_locked(self, key: str) -> bool:
        """Check whether a record for ``key`` is currently present."""
        return await self._store.exists(key)
