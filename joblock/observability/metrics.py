"""
Prometheus metrics collection.
"""

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
)

from joblock.constants import (
    METRIC_GUARDED_DURATION,
    METRIC_LOCK_ACQUIRE,
    METRIC_LOCK_RELEASE,
    METRIC_LOCK_RELEASE_FAILED,
    LockOutcome,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for job locks.

    Collects metrics for:
    - Acquire outcomes (granted / denied)
    - Releases and failed releases
    - Duration of guarded job bodies
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.lock_acquire = Counter(
            METRIC_LOCK_ACQUIRE,
            "Total number of lock acquire attempts",
            ["job_type", "outcome"],
            registry=self._registry,
        )

        self.lock_release = Counter(
            METRIC_LOCK_RELEASE,
            "Total number of lock releases",
            ["job_type"],
            registry=self._registry,
        )

        self.lock_release_failed = Counter(
            METRIC_LOCK_RELEASE_FAILED,
            "Total number of lock releases that raised a store error",
            ["job_type"],
            registry=self._registry,
        )

        self.guarded_duration = Histogram(
            METRIC_GUARDED_DURATION,
            "Duration of job bodies executed under a lock, in seconds",
            ["job_type", "status"],
            buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
            registry=self._registry,
        )

    def record_acquire(self, job_type: str, granted: bool) -> None:
        """Record an acquire attempt and its outcome."""
        outcome = LockOutcome.GRANTED if granted else LockOutcome.DENIED
        self.lock_acquire.labels(job_type=job_type, outcome=outcome.value).inc()

    def record_release(self, job_type: str) -> None:
        """Record a successful release."""
        self.lock_release.labels(job_type=job_type).inc()

    def record_release_failed(self, job_type: str) -> None:
        """Record a release that failed against the store."""
        self.lock_release_failed.labels(job_type=job_type).inc()

    def record_guarded_execution(
        self,
        job_type: str,
        status: str,
        duration_seconds: float,
    ) -> None:
        """Record how long a guarded job body ran."""
        self.guarded_duration.labels(job_type=job_type, status=status).observe(
            duration_seconds
        )


def setup_metrics(registry: CollectorRegistry | None = None) -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Args:
        registry: Optional custom registry for the first initialization.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector(registry)
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
