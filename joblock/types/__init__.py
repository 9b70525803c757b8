"""
Type definitions for the job lock.
"""

from joblock.types.lock import JobInvocation, LockSpec

__all__ = [
    "LockSpec",
    "JobInvocation",
]
