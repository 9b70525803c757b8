"""
Execution guard: the hooks a job scheduler calls around a job's lifetime.

- before_submit: acquire the job's lock, and tell the scheduler whether
  to enqueue
- around_execute: run the job body and release the lock on every exit
  path (return, exception, task cancellation)

The guard does not depend on any particular scheduler. Schedulers compose
it through whatever extension point they expose (middleware, decorators,
explicit calls).
"""

import functools
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from joblock.config import Settings, get_settings
from joblock.constants import SPAN_GUARDED_EXECUTE
from joblock.identity import (
    LockIdentity,
    LockPolicyRegistry,
    fixed_ttl,
    get_registry,
)
from joblock.lock import JobLock
from joblock.observability.logging import job_log_context
from joblock.observability.metrics import MetricsCollector, get_metrics
from joblock.observability.tracing import get_tracer
from joblock.store.redis import RedisLockStore
from joblock.types.lock import JobInvocation

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Type alias for a job body: a zero-argument coroutine function
JobBody = Callable[[], Awaitable[T]]


class JobLockGuard:
    """
    Submission guard and execution wrapper for deduplicated jobs.

    Features:
    - Per-job-type key/TTL derivation through a LockPolicyRegistry
    - Denied submissions are suppressed without raising
    - Guaranteed release after the job body, whatever the outcome

    If the job body fails and the release also fails, the body's exception
    propagates unchanged; the release failure is logged and counted. If the
    body succeeds and the release fails, the store error propagates.
    """

    def __init__(
        self,
        lock: JobLock,
        registry: LockPolicyRegistry | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize the guard.

        Args:
            lock: The lock protocol over the shared store.
            registry: Lock policies. Defaults to the process-wide registry.
            metrics: Metrics collector. Defaults to the global collector.
        """
        self._lock = lock
        self._registry = registry or get_registry()
        self._metrics = metrics or get_metrics()

    @property
    def lock(self) -> JobLock:
        return self._lock

    @property
    def registry(self) -> LockPolicyRegistry:
        return self._registry

    async def before_submit(self, job_type: str, args: Sequence[Any]) -> bool:
        """
        Pre-submission hook.

        Args:
            job_type: The job type identifier.
            args: The job's ordered arguments.

        Returns:
            True if the job should be enqueued, False if an identical job
            is already outstanding.
        """
        spec = self._registry.derive(job_type, args)
        granted = await self._lock.acquire(spec.key, spec.ttl)
        self._metrics.record_acquire(job_type, granted)

        if not granted:
            logger.debug(
                "Submission suppressed, job already outstanding",
                extra={"job_type": job_type, "lock_key": spec.key},
            )

        return granted

    async def around_execute(
        self,
        job_type: str,
        args: Sequence[Any],
        body: JobBody[T],
    ) -> T:
        """
        Execution-wrapping hook.

        Awaits ``body()`` exactly once, then releases the job's lock.

        Args:
            job_type: The job type identifier.
            args: The same arguments the job was submitted with.
            body: Zero-argument coroutine function running the job.

        Returns:
            Whatever the body returns.
        """
        lock_key = self._registry.derive_key(job_type, args)
        start_time = time.time()

        with job_log_context(job_type, lock_key):
            try:
                with get_tracer().start_as_current_span(SPAN_GUARDED_EXECUTE) as span:
                    span.set_attribute("job_type", job_type)
                    span.set_attribute("lock.key", lock_key)
                    result = await body()
            except BaseException as exc:
                self._metrics.record_guarded_execution(
                    job_type=job_type,
                    status=type(exc).__name__,
                    duration_seconds=time.time() - start_time,
                )
                await self._release_after_failure(job_type, lock_key)
                raise

            self._metrics.record_guarded_execution(
                job_type=job_type,
                status="succeeded",
                duration_seconds=time.time() - start_time,
            )
            await self._release(job_type, lock_key)

        return result

    async def submit(
        self,
        job_type: str,
        args: Sequence[Any],
        enqueue: Callable[[], Awaitable[Any]],
    ) -> bool:
        """
        Acquire the job's lock and enqueue it if granted.

        If ``enqueue`` raises, the job never became outstanding, so the
        lock is released before the error propagates.

        Returns:
            True if the job was enqueued, False if it was suppressed.
        """
        if not await self.before_submit(job_type, args):
            return False

        try:
            await enqueue()
        except BaseException:
            lock_key = self._registry.derive_key(job_type, args)
            await self._release_after_failure(job_type, lock_key)
            raise

        return True

    async def submit_invocation(
        self,
        invocation: JobInvocation,
        enqueue: Callable[[], Awaitable[Any]],
    ) -> bool:
        """Same as ``submit`` for a JobInvocation value."""
        return await self.submit(invocation.job_type, invocation.args, enqueue)

    async def _release(self, job_type: str, key: str) -> None:
        await self._lock.release(key)
        self._metrics.record_release(job_type)

    async def _release_after_failure(self, job_type: str, key: str) -> None:
        # An in-flight exception takes priority over a failed release
        try:
            await self._release(job_type, key)
        except Exception:
            self._metrics.record_release_failed(job_type)
            logger.exception(
                "Lock release failed after job failure, lock left held",
                extra={"job_type": job_type, "lock_key": key},
            )


def locked(guard: JobLockGuard, job_type: str) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator running an async job handler inside ``guard.around_execute``.

    The handler's positional arguments are the job arguments used to
    derive the lock key, so they must match what was submitted. Keyword
    arguments are rejected with a TypeError: the lock key is derived from
    the ordered argument list only, so they would be left out of it.

    Example:
        @locked(guard, "update_network_graph")
        async def update_network_graph(repo_id: int) -> None:
            ...
    """
    def decorator(handler: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(handler)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            if kwargs:
                raise TypeError(
                    f"{handler.__name__}() is locked on positional job arguments; "
                    f"pass {', '.join(sorted(kwargs))} positionally"
                )
            return await guard.around_execute(job_type, args, lambda: handler(*args))
        return wrapper
    return decorator


def build_guard(
    settings: Settings | None = None,
    registry: LockPolicyRegistry | None = None,
) -> JobLockGuard:
    """
    Build a guard over Redis from settings.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        registry: Lock policies. Defaults to the process-wide registry.

    Returns:
        JobLockGuard: A guard backed by a RedisLockStore.
    """
    settings = settings or get_settings()
    registry = registry or get_registry()

    if settings.lock_default_ttl_seconds is not None:
        registry = registry.with_default(
            LockIdentity(ttl_fn=fixed_ttl(settings.lock_default_ttl_seconds))
        )

    store = RedisLockStore.from_url(settings.redis_url)
    lock = JobLock(
        store,
        sentinel=settings.lock_sentinel,
        atomic_expiry=settings.lock_atomic_expiry,
    )

    logger.info(
        "Job lock guard configured",
        extra={
            "atomic_expiry": settings.lock_atomic_expiry,
            "default_ttl": settings.lock_default_ttl_seconds,
        },
    )

    return JobLockGuard(lock, registry=registry)
