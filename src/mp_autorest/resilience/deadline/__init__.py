"""Resilience – Deadline propagation via contextvars."""
from mp_autorest.resilience.deadline.context import (
    Deadline,
    DeadlineContext,
    DeadlineExceededError,
    deadline_aware,
    sleep,
)

__all__ = ["Deadline", "DeadlineContext", "DeadlineExceededError", "deadline_aware", "sleep"]
