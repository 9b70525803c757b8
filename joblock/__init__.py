"""
Job Deduplication Lock

Keeps at most one instance of a logically identical job outstanding
(queued or running) across many submitting and worker processes, using a
shared key-value store as the only coordination point.
"""

__version__ = "1.0.0"

from joblock.guard import JobLockGuard, build_guard, locked
from joblock.identity import (
    LockIdentity,
    LockPolicyRegistry,
    constant_key,
    default_lock_key,
    default_lock_ttl,
    fixed_ttl,
    register_lock_policy,
)
from joblock.lock import JobLock
from joblock.store import InMemoryLockStore, LockStore, RedisLockStore
from joblock.types import JobInvocation, LockSpec

__all__ = [
    "JobLock",
    "JobLockGuard",
    "build_guard",
    "locked",
    "LockIdentity",
    "LockPolicyRegistry",
    "register_lock_policy",
    "default_lock_key",
    "default_lock_ttl",
    "constant_key",
    "fixed_ttl",
    "LockStore",
    "InMemoryLockStore",
    "RedisLockStore",
    "LockSpec",
    "JobInvocation",
]
