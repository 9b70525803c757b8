"""
Lock identity: mapping a job type and its arguments to a lock key and TTL.

Both functions are pure and overridable per job type. Overriding the key
function to ignore the arguments collapses every payload of a job type
into one lock, which gives global mutual exclusion for that type.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from joblock.constants import LOCK_KEY_PREFIX, LOCK_KEY_SEPARATOR
from joblock.types.lock import LockSpec

logger = logging.getLogger(__name__)

# Type aliases for the per-type strategy functions
LockKeyFunc = Callable[[str, Sequence[Any]], str]
LockTTLFunc = Callable[[str, Sequence[Any]], int | None]


def default_lock_key(job_type: str, args: Sequence[Any]) -> str:
    """
    Derive the default lock key.

    The argument list is rendered with ``repr`` so that order and type are
    significant: ``[1]`` and ``['1']`` produce different keys.

    Args:
        job_type: The job type identifier.
        args: The job's ordered arguments.

    Returns:
        A key of the form ``lock:<job_type>-<repr(args)>``.
    """
    return f"{LOCK_KEY_PREFIX}{job_type}{LOCK_KEY_SEPARATOR}{list(args)!r}"


def default_lock_ttl(job_type: str, args: Sequence[Any]) -> int | None:
    """Default TTL: unbounded, the lock only goes away on release."""
    return None


def constant_key(name: str) -> LockKeyFunc:
    """
    Build a key function that ignores the job arguments.

    Args:
        name: The key every invocation of the job type maps to.

    Returns:
        A key function returning ``name`` unchanged.
    """
    def key_fn(job_type: str, args: Sequence[Any]) -> str:
        return name
    return key_fn


def fixed_ttl(seconds: int | None) -> LockTTLFunc:
    """Build a TTL function returning the same value for every invocation."""
    _validate_ttl(seconds)

    def ttl_fn(job_type: str, args: Sequence[Any]) -> int | None:
        return seconds
    return ttl_fn


def _validate_ttl(ttl: Any) -> None:
    if ttl is None:
        return
    # bool is an int subclass but never a meaningful TTL
    if isinstance(ttl, bool) or not isinstance(ttl, int):
        raise TypeError(f"Lock TTL must be an int or None, got {type(ttl).__name__}")
    if ttl < 0:
        raise ValueError(f"Lock TTL must be non-negative, got {ttl}")


@dataclass(frozen=True)
class LockIdentity:
    """
    Strategy pair deriving the lock key and TTL for a job type.

    Injected into the guard rather than inherited by job classes.
    """

    key_fn: LockKeyFunc = default_lock_key
    ttl_fn: LockTTLFunc = default_lock_ttl

    def derive(self, job_type: str, args: Sequence[Any]) -> LockSpec:
        """
        Derive the lock spec for one invocation.

        Raises:
            TypeError: If the TTL function returns a non-int value.
            ValueError: If the TTL function returns a negative value.
        """
        ttl = self.ttl_fn(job_type, args)
        _validate_ttl(ttl)
        return LockSpec(key=self.key_fn(job_type, args), ttl=ttl)

    def derive_key(self, job_type: str, args: Sequence[Any]) -> str:
        """Derive only the lock key; the TTL function is not called."""
        return self.key_fn(job_type, args)


DEFAULT_IDENTITY = LockIdentity()


class LockPolicyRegistry:
    """
    Per-job-type lock identities.

    Overrides are stored per half, so a job type that only overrides its
    key still follows the registry's default TTL and vice versa.
    """

    def __init__(self, default: LockIdentity | None = None):
        self._default = default or DEFAULT_IDENTITY
        self._overrides: dict[str, tuple[LockKeyFunc | None, LockTTLFunc | None]] = {}

    @property
    def default(self) -> LockIdentity:
        return self._default

    def register(
        self,
        job_type: str,
        key: LockKeyFunc | None = None,
        ttl: LockTTLFunc | None = None,
    ) -> None:
        """
        Register lock overrides for a job type.

        Args:
            job_type: The job type the overrides apply to.
            key: Optional key function override.
            ttl: Optional TTL function override.
        """
        self._overrides[job_type] = (key, ttl)
        logger.info(f"Registered lock policy for job type: {job_type}")

    def get_identity(self, job_type: str) -> LockIdentity:
        """Get the identity for a job type, filling gaps from the default."""
        key, ttl = self._overrides.get(job_type, (None, None))
        if key is None and ttl is None:
            return self._default
        return LockIdentity(
            key_fn=key or self._default.key_fn,
            ttl_fn=ttl or self._default.ttl_fn,
        )

    def derive(self, job_type: str, args: Sequence[Any]) -> LockSpec:
        """Derive the lock spec for a job type and its arguments."""
        return self.get_identity(job_type).derive(job_type, args)

    def derive_key(self, job_type: str, args: Sequence[Any]) -> str:
        """Derive only the lock key, as needed to release."""
        return self.get_identity(job_type).derive_key(job_type, args)

    def with_default(self, default: LockIdentity) -> "LockPolicyRegistry":
        """Copy this registry's overrides onto a different default identity."""
        registry = LockPolicyRegistry(default)
        registry._overrides = dict(self._overrides)
        return registry

    def list_policies(self) -> list[str]:
        """List job types with registered overrides."""
        return list(self._overrides.keys())


# Process-wide registry used when no registry is passed explicitly
_registry = LockPolicyRegistry()


def get_registry() -> LockPolicyRegistry:
    """Get the process-wide lock policy registry."""
    return _registry


def register_lock_policy(
    job_type: str,
    key: LockKeyFunc | None = None,
    ttl: LockTTLFunc | None = None,
) -> Callable[[Any], Any]:
    """
    Decorator registering a lock policy for a job type in the process-wide registry.

    Args:
        job_type: The job type this policy applies to.
        key: Optional key function override.
        ttl: Optional TTL function override.

    Returns:
        Decorator returning the decorated object unchanged.

    Example:
        @register_lock_policy("update_network_graph", key=constant_key("network-graph"))
        async def update_network_graph(repo_id: int) -> None:
            ...
    """
    def decorator(target: Any) -> Any:
        _registry.register(job_type, key=key, ttl=ttl)
        return target
    return decorator
