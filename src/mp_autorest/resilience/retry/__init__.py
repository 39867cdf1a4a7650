"""Resilience – backoff strategies used between retry attempts."""
from mp_autorest.resilience.retry.backoff import BackoffStrategy, ExponentialBackoff, as_backoff

__all__ = ["BackoffStrategy", "ExponentialBackoff", "as_backoff"]
