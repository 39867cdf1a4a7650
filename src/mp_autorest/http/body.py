"""HTTP pipeline – response body ownership helpers."""
from __future__ import annotations

import httpx

from mp_autorest.observability.logging import get_logger

logger = get_logger(__name__)


async def close_response(response: httpx.Response | None) -> None:
    """Close *response*'s body.

    Tolerates ``None`` and already-closed responses. A failure while
    closing is logged and ignored.
    """
    if response is None or response.is_closed:
        return
    try:
        await response.aclose()
    except Exception as exc:  # noqa: BLE001
        logger.warning("http.response.close_failed", status_code=response.status_code, error=repr(exc))


def response_of(exc: BaseException | None) -> httpx.Response | None:
    """Return the response attached to a pipeline error, if any."""
    response = getattr(exc, "response", None)
    return response if isinstance(response, httpx.Response) else None


def request_of(response: httpx.Response) -> httpx.Request | None:
    """Return the request that produced *response*, or ``None`` when unset."""
    try:
        return response.request
    except RuntimeError:
        return None


def describe(request: httpx.Request | None) -> str:
    if request is None:
        return "<unknown request>"
    return f"{request.method} {request.url}"


__all__ = ["close_response", "describe", "request_of", "response_of"]
