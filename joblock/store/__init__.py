"""
Lock store implementations.
"""

from joblock.store.base import LockStore
from joblock.store.memory import InMemoryLockStore
from joblock.store.redis import RedisLockStore

__all__ = [
    "LockStore",
    "InMemoryLockStore",
    "RedisLockStore",
]
