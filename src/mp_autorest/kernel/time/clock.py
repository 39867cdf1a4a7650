"""Kernel time – Clock port used for token expiry checks."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """Clock that only moves when told to.

    The instant must be timezone-aware; expiry comparisons against naive
    datetimes would silently use local time.
    """

    def __init__(self, at: datetime) -> None:
        self._at = self._aware(at)

    @staticmethod
    def _aware(value: datetime) -> datetime:
        if value.tzinfo is None:
            raise ValueError("FrozenClock needs a timezone-aware datetime")
        return value

    def now(self) -> datetime:
        return self._at

    def set(self, at: datetime) -> None:
        self._at = self._aware(at)

    def advance(self, seconds: float = 0.0, **delta: float) -> None:
        """Move forward by *seconds* plus any extra ``timedelta`` keywords."""
        self._at += timedelta(seconds=seconds, **delta)


__all__ = ["Clock", "FrozenClock", "SystemClock"]
