from __future__ import annotations

import asyncio
import contextlib
import dataclasses
from asyncio import TimeoutError as AsyncTimeoutError
from contextvars import ContextVar, Token
from datetime import UTC, datetime, timedelta
from typing import Any, Awaitable

from mp_autorest.kernel.errors import BaseError

__all__ = [
    "Deadline",
    "DeadlineContext",
    "DeadlineExceededError",
    "deadline_aware",
    "sleep",
]


class DeadlineExceededError(BaseError):
    """Raised when the active deadline has been exceeded."""

    default_code = "deadline_exceeded"


@dataclasses.dataclass(frozen=True)
class Deadline:
    """An absolute deadline derived from a timeout."""
    expires_at: datetime

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(expires_at=datetime.now(UTC) + timedelta(seconds=seconds))

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, (self.expires_at - datetime.now(UTC)).total_seconds())

    @property
    def is_expired(self) -> bool:
        return datetime.now(UTC) >= self.expires_at

    def raise_if_expired(self) -> None:
        if self.is_expired:
            raise DeadlineExceededError("Deadline exceeded")


_DEADLINE_VAR: ContextVar[Deadline | None] = ContextVar("_deadline", default=None)


class DeadlineContext:
    """Context-variable wrapper for propagating deadlines across async boundaries."""

    @staticmethod
    def set(deadline: Deadline) -> Token[Deadline | None]:
        return _DEADLINE_VAR.set(deadline)

    @staticmethod
    def get() -> Deadline | None:
        return _DEADLINE_VAR.get()

    @staticmethod
    def reset(token: Token[Deadline | None]) -> None:
        _DEADLINE_VAR.reset(token)

    @staticmethod
    def raise_if_exceeded() -> None:
        dl = _DEADLINE_VAR.get()
        if dl is not None and dl.is_expired:
            raise DeadlineExceededError("Deadline exceeded")

    @staticmethod
    @contextlib.asynccontextmanager
    async def scoped(deadline: Deadline):  # type: ignore[return]
        token = _DEADLINE_VAR.set(deadline)
        try:
            yield deadline
        finally:
            _DEADLINE_VAR.reset(token)


async def sleep(seconds: float, deadline: Deadline | None = None) -> None:
    """Wait *seconds*, but never past the given (or context) deadline.

    When the deadline falls inside the wait, sleeps until the deadline and
    raises :class:`DeadlineExceededError`. Task cancellation interrupts the
    wait as usual.
    """
    seconds = max(0.0, seconds)
    dl = deadline or _DEADLINE_VAR.get()
    if dl is None:
        await asyncio.sleep(seconds)
        return
    if dl.is_expired:
        raise DeadlineExceededError("Deadline already exceeded")
    remaining = dl.remaining_seconds
    if remaining < seconds:
        await asyncio.sleep(remaining)
        raise DeadlineExceededError(f"Deadline exceeded while waiting {seconds:.3f}s")
    await asyncio.sleep(seconds)


async def deadline_aware(coro: Awaitable[Any], deadline: Deadline | None = None) -> Any:
    """Wrap *coro* so it times out if the given (or context) deadline expires.

    Raises :class:`DeadlineExceededError` on timeout.
    """
    import inspect

    dl = deadline or _DEADLINE_VAR.get()
    if dl is None:
        return await coro
    remaining = dl.remaining_seconds
    if remaining <= 0:
        # Close the coroutine cleanly to avoid ResourceWarning
        if inspect.iscoroutine(coro):
            coro.close()
        raise DeadlineExceededError("Deadline already exceeded")
    try:
        return await asyncio.wait_for(asyncio.ensure_future(coro), timeout=remaining)
    except AsyncTimeoutError:
        raise DeadlineExceededError("Deadline exceeded during execution") from None
