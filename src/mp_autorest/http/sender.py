"""HTTP pipeline – Sender stage and retry engine.

A sender delivers a prepared request and returns the response. Sender
decorators wrap the transport from the outside in: the first decorator
listed sees the outgoing request first and the returned response last.

Failures are exceptions. When a failure is tied to a response (an
unexpected status code, for instance) the exception carries it as
``.response`` and whoever handles the exception owns its body. The retry
decorators close the bodies of abandoned attempts and leave the final one
to the caller.
"""
from __future__ import annotations

import dataclasses
import time
from typing import Any, Awaitable, Callable, Protocol

import httpx
import tenacity

from mp_autorest.http.body import close_response, describe, response_of
from mp_autorest.kernel.errors import StatusCodeError
from mp_autorest.observability.logging import SensitiveFieldsFilter, get_logger
from mp_autorest.resilience.deadline import Deadline, DeadlineExceededError, sleep
from mp_autorest.resilience.retry import BackoffStrategy, as_backoff

logger = get_logger(__name__)

_PACKAGE = "autorest"


class Sender(Protocol):
    async def send(self, request: httpx.Request) -> httpx.Response: ...


@dataclasses.dataclass(frozen=True)
class SenderFunc:
    """Adapt a coroutine function to the :class:`Sender` protocol."""

    func: Callable[[httpx.Request], Awaitable[httpx.Response]]

    async def send(self, request: httpx.Request) -> httpx.Response:
        return await self.func(request)


SendDecorator = Callable[[Sender], Sender]


def decorate_sender(sender: Sender, *decorators: SendDecorator) -> Sender:
    """Wrap *sender*; the first decorator listed becomes the outermost."""
    for decorate in reversed(decorators):
        sender = decorate(sender)
    return sender


async def send_with_sender(
    sender: Sender, request: httpx.Request, *decorators: SendDecorator
) -> httpx.Response:
    return await decorate_sender(sender, *decorators).send(request)


def response_has_status_code(response: httpx.Response | None, *codes: int) -> bool:
    return response is not None and response.status_code in codes


# ---------------------------------------------------------------------------
# Plain decorators
# ---------------------------------------------------------------------------


def as_is() -> SendDecorator:
    def decorator(sender: Sender) -> Sender:
        return sender

    return decorator


def with_logging(logger: Any = None, *, log_headers: bool = False) -> SendDecorator:
    """Log each request before it is sent and its outcome after.

    Header values named in :data:`DEFAULT_SENSITIVE_FIELDS` are redacted.
    """
    log = logger or get_logger(__name__)
    redactor = SensitiveFieldsFilter()

    def decorator(sender: Sender) -> Sender:
        async def _send(request: httpx.Request) -> httpx.Response:
            fields: dict[str, Any] = {"method": request.method, "url": str(request.url)}
            if log_headers:
                fields["headers"] = redactor.redact(dict(request.headers))
            log.info("http.request.sending", **fields)
            started = time.perf_counter()
            try:
                response = await sender.send(request)
            except Exception as exc:
                failed = response_of(exc)
                log.warning(
                    "http.request.failed",
                    method=request.method,
                    url=str(request.url),
                    status_code=failed.status_code if failed is not None else None,
                    error=repr(exc),
                )
                raise
            received: dict[str, Any] = {
                "method": request.method,
                "url": str(request.url),
                "status_code": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 3),
            }
            if log_headers:
                received["headers"] = redactor.redact(dict(response.headers))
            log.info("http.response.received", **received)
            return response

        return SenderFunc(_send)

    return decorator


def _status_check(method: str, failed: Callable[[int], bool]) -> SendDecorator:
    def decorator(sender: Sender) -> Sender:
        async def _send(request: httpx.Request) -> httpx.Response:
            response = await sender.send(request)
            if failed(response.status_code):
                raise StatusCodeError(
                    f"{describe(request)} returned unexpected status {response.status_code}",
                    package_type=_PACKAGE,
                    method=method,
                    response=response,
                )
            return response

        return SenderFunc(_send)

    return decorator


def do_error_if_status_code(*codes: int) -> SendDecorator:
    """Raise :class:`StatusCodeError` when the status code is one of *codes*."""
    return _status_check("do_error_if_status_code", lambda status: status in codes)


def do_error_unless_status_code(*codes: int) -> SendDecorator:
    """Raise :class:`StatusCodeError` when the status code is not one of *codes*."""
    return _status_check("do_error_unless_status_code", lambda status: status not in codes)


def do_close_if_error() -> SendDecorator:
    """Close the response attached to any failure before re-raising it."""

    def decorator(sender: Sender) -> Sender:
        async def _send(request: httpx.Request) -> httpx.Response:
            try:
                return await sender.send(request)
            except Exception as exc:
                await close_response(response_of(exc))
                raise

        return SenderFunc(_send)

    return decorator


def after_delay(delay: float) -> SendDecorator:
    """Wait the full *delay* seconds before each send."""

    def decorator(sender: Sender) -> Sender:
        async def _send(request: httpx.Request) -> httpx.Response:
            await sleep(delay)
            return await sender.send(request)

        return SenderFunc(_send)

    return decorator


# ---------------------------------------------------------------------------
# Backoff
# ---------------------------------------------------------------------------


def backoff_delay(backoff: float | BackoffStrategy, attempt: int) -> float:
    """Seconds to wait after the *attempt*-th failure (0-based): ``backoff * 2**attempt``."""
    return as_backoff(backoff).compute(attempt)


async def delay_for_backoff(
    backoff: float | BackoffStrategy, attempt: int, deadline: Deadline | None = None
) -> None:
    """Sleep for :func:`backoff_delay`, interrupted by *deadline* or cancellation."""
    await sleep(backoff_delay(backoff, attempt), deadline)


# ---------------------------------------------------------------------------
# Retry
# ---------------------------------------------------------------------------


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, Exception) and not isinstance(exc, DeadlineExceededError)


class _RetryRun:
    """State for one retried send: remembers the abandoned response so it is
    closed before the backoff sleep."""

    def __init__(self, method: str, request: httpx.Request) -> None:
        self._method = method
        self._request = request
        self._abandoned: httpx.Response | None = None

    def before_sleep(self, state: tenacity.RetryCallState) -> None:
        exc = state.outcome.exception() if state.outcome is not None else None
        self._abandoned = response_of(exc)
        logger.info(
            "http.retry.scheduled",
            retry_method=self._method,
            request=describe(self._request),
            attempt=state.attempt_number,
            delay=state.next_action.sleep if state.next_action is not None else None,
            error=repr(exc),
        )

    async def sleep(self, seconds: float) -> None:
        abandoned, self._abandoned = self._abandoned, None
        await close_response(abandoned)
        await sleep(seconds)


def _retrying(
    stop: tenacity.stop.stop_base,
    wait: Callable[[tenacity.RetryCallState], float],
    run: _RetryRun,
) -> tenacity.AsyncRetrying:
    return tenacity.AsyncRetrying(
        stop=stop,
        wait=wait,
        retry=tenacity.retry_if_exception(_is_retryable),
        before_sleep=run.before_sleep,
        sleep=run.sleep,
        reraise=True,
    )


def _retry_decorator(
    method: str,
    stop: tenacity.stop.stop_base,
    wait_for: Callable[[tenacity.RetryCallState], float],
) -> SendDecorator:
    def decorator(sender: Sender) -> Sender:
        async def _send(request: httpx.Request) -> httpx.Response:
            await request.aread()
            run = _RetryRun(method, request)
            async for attempt in _retrying(stop, wait_for, run):
                with attempt:
                    return await sender.send(request)
            raise RuntimeError("retry loop finished without an outcome")

        return SenderFunc(_send)

    return decorator


def do_retry_for_attempts(attempts: int, backoff: float | BackoffStrategy) -> SendDecorator:
    """Send up to *attempts* times (at least once) until a send succeeds.

    The last failure is re-raised once attempts run out; a response it
    carries is left open for the caller.
    """
    strategy = as_backoff(backoff)
    return _retry_decorator(
        "do_retry_for_attempts",
        tenacity.stop_after_attempt(max(1, attempts)),
        lambda state: strategy.compute(state.attempt_number - 1),
    )


def do_retry_for_duration(duration: float, backoff: float | BackoffStrategy) -> SendDecorator:
    """Retry failed sends until *duration* seconds have elapsed.

    At least one attempt is made. A backoff sleep never extends past the
    end of *duration*.
    """
    strategy = as_backoff(backoff)

    def wait_for(state: tenacity.RetryCallState) -> float:
        remaining = max(0.0, duration - state.seconds_since_start)
        return min(strategy.compute(state.attempt_number - 1), remaining)

    return _retry_decorator("do_retry_for_duration", tenacity.stop_after_delay(duration), wait_for)


__all__ = [
    "SendDecorator",
    "Sender",
    "SenderFunc",
    "after_delay",
    "as_is",
    "backoff_delay",
    "decorate_sender",
    "delay_for_backoff",
    "do_close_if_error",
    "do_error_if_status_code",
    "do_error_unless_status_code",
    "do_retry_for_attempts",
    "do_retry_for_duration",
    "response_has_status_code",
    "send_with_sender",
    "with_logging",
]
