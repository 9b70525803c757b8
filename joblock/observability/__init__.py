"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from joblock.observability.logging import job_log_context, setup_logging
from joblock.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from joblock.observability.tracing import get_tracer, setup_tracing

__all__ = [
    "setup_logging",
    "job_log_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
]
