"""
Pytest configuration and shared fixtures.
"""

import pytest
from prometheus_client import CollectorRegistry

from joblock.config import Settings
from joblock.guard import JobLockGuard
from joblock.identity import LockPolicyRegistry
from joblock.lock import JobLock
from joblock.observability.metrics import MetricsCollector
from joblock.store.memory import InMemoryLockStore


class FakeClock:
    """Manually advanced monotonic clock for expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> InMemoryLockStore:
    """Create an in-memory store driven by the fake clock."""
    return InMemoryLockStore(clock=clock)


@pytest.fixture
def job_lock(store: InMemoryLockStore) -> JobLock:
    """Create a lock over the in-memory store."""
    return JobLock(store)


@pytest.fixture
def registry() -> LockPolicyRegistry:
    """Create an empty lock policy registry."""
    return LockPolicyRegistry()


@pytest.fixture
def metrics() -> MetricsCollector:
    """Create a metrics collector with an isolated registry."""
    return MetricsCollector(registry=CollectorRegistry())


@pytest.fixture
def guard(
    job_lock: JobLock,
    registry: LockPolicyRegistry,
    metrics: MetricsCollector,
) -> JobLockGuard:
    """Create a guard wired to the in-memory store."""
    return JobLockGuard(job_lock, registry=registry, metrics=metrics)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        redis_url="redis://fake:6379/0",
        log_level="DEBUG",
        log_format="console",
    )
