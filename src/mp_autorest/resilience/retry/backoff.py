"""Resilience – backoff strategies."""
from __future__ import annotations

import abc

# Exponent cap so the delay stays finite for very large attempt numbers.
_MAX_EXPONENT = 62


class BackoffStrategy(abc.ABC):
    """Compute wait duration (seconds) after the *attempt*-th failure (0-based)."""

    @abc.abstractmethod
    def compute(self, attempt: int) -> float: ...


class ExponentialBackoff(BackoffStrategy):
    """Delay grows exponentially: ``base_delay * 2^attempt``.

    Negative results are floored at zero and ``max_delay``, when given,
    clamps the top end. Both keep the sequence non-decreasing in *attempt*.
    """

    def __init__(self, base_delay: float = 0.1, max_delay: float | None = None) -> None:
        self._base = max(0.0, base_delay)
        self._max = max_delay

    def compute(self, attempt: int) -> float:
        delay = self._base * (2 ** min(max(attempt, 0), _MAX_EXPONENT))
        if self._max is not None:
            delay = min(delay, self._max)
        return max(0.0, delay)


def as_backoff(backoff: float | BackoffStrategy) -> BackoffStrategy:
    """Accept either a base delay in seconds or a ready-made strategy."""
    if isinstance(backoff, BackoffStrategy):
        return backoff
    return ExponentialBackoff(base_delay=float(backoff))


__all__ = ["BackoffStrategy", "ExponentialBackoff", "as_backoff"]
