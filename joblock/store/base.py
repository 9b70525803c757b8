"""
Key-value store boundary consumed by the lock.
"""

from typing import Protocol


class LockStore(Protocol):
    """
    Key-value store interface used for lock records.

    Implementations must guarantee:
    - ``set_if_absent`` is atomic: of many concurrent callers for one key,
      exactly one observes the key as absent
    - ``delete`` is idempotent
    - Store/transport failures are raised, never reported as a denial

    Values are never read back; only presence matters.
    """

    async def set_if_absent(
        self,
        key: str,
        value: str,
        ttl_seconds: int | None = None,
    ) -> bool:
        """
        Set ``key`` only if it is not present.

        When ``ttl_seconds`` is given, the expiry is applied in the same
        atomic step.

        Returns:
            True if the key was absent and is now set, False otherwise.
        """
        ...

    async def expire(self, key: str, seconds: int) -> bool:
        """
        Set a relative expiry on an existing key.

        Returns:
            True if the key existed and the expiry was set.
        """
        ...

    async def delete(self, key: str) -> int:
        """
        Remove ``key``.

        Returns:
            Number of keys removed (0 if it was already absent).
        """
        ...

    async def exists(self, key: str) -> bool:
        """Check whether a record for ``key`` is currently present."""
        ...
