"""
Lock-related type definitions.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class LockSpec:
    """
    Lock key and TTL derived for one job invocation.

    The same spec must be derived at submission time and at completion
    time, otherwise the release targets a different key and the lock leaks.
    """

    key: str
    ttl: int | None = None

    @property
    def is_bounded(self) -> bool:
        """Whether the lock record expires on its own."""
        return self.ttl is not None


class JobInvocation(BaseModel):
    """
    A job type together with its ordered arguments.
    Used by schedulers that hand jobs to the guard as a single value.
    """

    job_type: str
    args: Sequence[Any] = Field(default_factory=tuple)
