"""HTTP pipeline – long-running operation polling.

A service that accepts work asynchronously answers ``202 Accepted`` with a
``Location`` header naming the URL to poll. :class:`Poller` waits, GETs
that URL, and repeats while the answer still means "in progress"::

    request = await new_polling_request(accepted, authorizer)
    response = await poll_for_attempts(sender, request, 5.0, 10)

Each in-progress response is closed before the next poll. The terminal
response, or the last one received when the budget runs out, is returned
open; callers tell the two apart by its status code.
"""
from __future__ import annotations

import asyncio
import dataclasses
import enum
import re
import time
from typing import Callable

import httpx

from mp_autorest.http.authorizer import Authorizer
from mp_autorest.http.body import close_response, describe, request_of, response_of
from mp_autorest.http.constants import DEFAULT_POLLING_CODES, HEADER_LOCATION, HEADER_RETRY_AFTER
from mp_autorest.http.preparer import as_get, prepare, rebuild_request, with_base_url
from mp_autorest.http.sender import Sender
from mp_autorest.kernel.errors import PollingError
from mp_autorest.observability.logging import get_logger
from mp_autorest.resilience.deadline import DeadlineExceededError, sleep

logger = get_logger(__name__)

_PACKAGE = "autorest"
_SECONDS_RE = re.compile(r"[0-9]+")


class PollingStatus(str, enum.Enum):
    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELED = "Canceled"

    @property
    def is_terminal(self) -> bool:
        return self is not PollingStatus.IN_PROGRESS


def response_requires_polling(response: httpx.Response | None, *codes: int) -> bool:
    """Return ``True`` when *response* says the operation is still running."""
    if response is None:
        return False
    return response.status_code in (codes or DEFAULT_POLLING_CODES)


def get_polling_location(response: httpx.Response) -> str:
    return response.headers.get(HEADER_LOCATION, "")


def get_polling_delay(response: httpx.Response, default_delay: float) -> float:
    """Seconds named by ``Retry-After``, or *default_delay* when absent or not a whole number."""
    value = response.headers.get(HEADER_RETRY_AFTER, "").strip()
    if not _SECONDS_RE.fullmatch(value):
        return default_delay
    return float(int(value))


def _resolve_location(response: httpx.Response) -> str:
    location = get_polling_location(response)
    request = request_of(response)
    if location and request is not None:
        return str(request.url.join(location))
    return location


def _status_of(response: httpx.Response, codes: tuple[int, ...]) -> PollingStatus:
    if response_requires_polling(response, *codes):
        return PollingStatus.IN_PROGRESS
    if response.is_success:
        return PollingStatus.SUCCEEDED
    return PollingStatus.FAILED


@dataclasses.dataclass
class PollingState:
    """Where a long-running operation stands after the latest poll."""

    status: PollingStatus
    polling_url: str
    delay: float
    last_response: httpx.Response | None = None
    default_delay: float | None = None

    def __post_init__(self) -> None:
        if self.delay < 0:
            raise ValueError(f"polling delay must be non-negative, got {self.delay}")
        if self.default_delay is None:
            self.default_delay = self.delay
        elif self.default_delay < 0:
            raise ValueError(f"default polling delay must be non-negative, got {self.default_delay}")

    @classmethod
    def from_response(cls, response: httpx.Response, default_delay: float, *codes: int) -> PollingState:
        request = request_of(response)
        url = _resolve_location(response) or (str(request.url) if request is not None else "")
        default_delay = max(0.0, default_delay)
        return cls(
            status=_status_of(response, codes),
            polling_url=url,
            delay=get_polling_delay(response, default_delay),
            last_response=response,
            default_delay=default_delay,
        )

    def update(self, response: httpx.Response, *codes: int) -> None:
        """Fold in the latest poll response: status, location and delay hint.

        Without a ``Retry-After`` the delay reverts to :attr:`default_delay`.
        """
        self.status = _status_of(response, codes)
        self.polling_url = _resolve_location(response) or self.polling_url
        self.delay = get_polling_delay(response, self.default_delay or 0.0)
        self.last_response = response


async def new_polling_request(response: httpx.Response, authorizer: Authorizer) -> httpx.Request:
    """Build the GET for the ``Location`` of an accepted *response*.

    The body of *response* is closed on every path, success or failure.
    """
    try:
        location = get_polling_location(response)
        if not location:
            raise PollingError(
                f"{describe(request_of(response))} returned {response.status_code} without a Location header",
                package_type=_PACKAGE,
                method="new_polling_request",
                response=response,
            )
        location = _resolve_location(response)
        try:
            return prepare(None, as_get(), with_base_url(location), authorizer.with_authorization())
        except Exception as exc:
            raise PollingError(
                f"failure creating poll request to {location!r}",
                package_type=_PACKAGE,
                method="new_polling_request",
                response=response,
                cause=exc,
            ) from exc
    finally:
        await close_response(response)


class Poller:
    """Poll one long-running operation until it leaves the in-progress state.

    Parameters
    ----------
    sender:
        Sender used for every poll request.
    request:
        The first poll request, usually from :func:`new_polling_request`.
    delay:
        Seconds to wait before the first poll.
    default_delay:
        Seconds to wait before a later poll whose predecessor carried no
        ``Retry-After``; *delay* when omitted.
    codes:
        Status codes meaning "still running"; ``202`` when empty.
    """

    def __init__(
        self,
        sender: Sender,
        request: httpx.Request,
        delay: float,
        *codes: int,
        default_delay: float | None = None,
    ) -> None:
        self._sender = sender
        self._request = request
        self._codes = codes
        self.state = PollingState(
            status=PollingStatus.IN_PROGRESS,
            polling_url=str(request.url),
            delay=max(0.0, delay),
            default_delay=max(0.0, delay if default_delay is None else default_delay),
        )

    async def poll_for_attempts(self, attempts: int) -> httpx.Response:
        """Poll at most *attempts* times (at least once)."""
        limit = max(1, attempts)
        return await self._poll(lambda polls, _elapsed: polls >= limit)

    async def poll_for_duration(self, duration: float) -> httpx.Response:
        """Poll until the operation finishes or *duration* seconds have passed."""
        return await self._poll(lambda _polls, elapsed: elapsed >= duration)

    async def _poll(self, exhausted: Callable[[int, float], bool]) -> httpx.Response:
        request = self._request
        started = time.monotonic()
        polls = 0
        try:
            while True:
                await sleep(self.state.delay)
                polls += 1
                try:
                    response = await self._sender.send(request)
                except DeadlineExceededError:
                    raise
                except Exception as exc:
                    if exhausted(polls, time.monotonic() - started):
                        raise
                    logger.warning("http.polling.failed", url=str(request.url), poll=polls, error=repr(exc))
                    await close_response(response_of(exc))
                    continue

                self.state.update(response, *self._codes)
                logger.info(
                    "http.polling.response",
                    url=str(request.url),
                    poll=polls,
                    status_code=response.status_code,
                    polling_status=self.state.status.value,
                )
                if self.state.status.is_terminal or exhausted(polls, time.monotonic() - started):
                    return response

                await close_response(response)
                if self.state.polling_url != str(request.url):
                    request = rebuild_request(request, url=request.url.join(self.state.polling_url))
        except (DeadlineExceededError, asyncio.CancelledError):
            self.state.status = PollingStatus.CANCELED
            raise


async def poll_for_attempts(
    sender: Sender, request: httpx.Request, delay: float, attempts: int, *codes: int
) -> httpx.Response:
    return await Poller(sender, request, delay, *codes).poll_for_attempts(attempts)


async def poll_for_duration(
    sender: Sender, request: httpx.Request, delay: float, duration: float, *codes: int
) -> httpx.Response:
    return await Poller(sender, request, delay, *codes).poll_for_duration(duration)


__all__ = [
    "Poller",
    "PollingState",
    "PollingStatus",
    "get_polling_delay",
    "get_polling_location",
    "new_polling_request",
    "poll_for_attempts",
    "poll_for_duration",
    "response_requires_polling",
]
