"""Resilience – backoff strategies and deadline-aware waiting."""

from mp_autorest.resilience.deadline import Deadline, DeadlineContext, DeadlineExceededError, deadline_aware, sleep
from mp_autorest.resilience.retry import BackoffStrategy, ExponentialBackoff

__all__ = [
    "BackoffStrategy",
    "Deadline",
    "DeadlineContext",
    "DeadlineExceededError",
    "ExponentialBackoff",
    "deadline_aware",
    "sleep",
]
