"""
Library constants.
Centralized location for all constant values used across the package.
"""

from enum import StrEnum


class LockOutcome(StrEnum):
    """
    Outcome of an acquire attempt, as recorded in metrics.

    State transitions (per job invocation):
    - UNLOCKED -> LOCKED (acquire granted)
    - UNLOCKED -> UNLOCKED (acquire denied, submission suppressed)
    - LOCKED -> UNLOCKED (release, or TTL elapsed in the store)
    """

    GRANTED = "granted"
    DENIED = "denied"


# Lock key derivation
LOCK_KEY_PREFIX = "lock:"
LOCK_KEY_SEPARATOR = "-"

# Value written for a held lock; never read back
DEFAULT_LOCK_SENTINEL = "true"

# Metrics names
METRIC_LOCK_ACQUIRE = "job_lock_acquire_total"
METRIC_LOCK_RELEASE = "job_lock_release_total"
METRIC_LOCK_RELEASE_FAILED = "job_lock_release_failed_total"
METRIC_GUARDED_DURATION = "job_lock_guarded_duration_seconds"

# Trace span names
SPAN_ACQUIRE_LOCK = "acquire_lock"
SPAN_RELEASE_LOCK = "release_lock"
SPAN_GUARDED_EXECUTE = "guarded_execute"
