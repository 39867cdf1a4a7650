"""HTTP adapter – HttpxSender."""
from __future__ import annotations

from typing import Any

import httpx

from mp_autorest.http.body import describe
from mp_autorest.kernel.errors import TransportError, TransportTimeoutError

_PACKAGE = "autorest"


class HttpxSender:
    """Sender backed by an :class:`httpx.AsyncClient`.

    Responses are streamed: the body stays unread until a responder reads
    it, and the caller owns closing it. httpx failures are mapped onto
    :class:`TransportError` / :class:`TransportTimeoutError`.
    """

    def __init__(self, client: httpx.AsyncClient | None = None, **client_kwargs: Any) -> None:
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(**client_kwargs)

    async def __aenter__(self) -> "HttpxSender":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, request: httpx.Request) -> httpx.Response:
        try:
            return await self._client.send(request, stream=True)
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(
                f"HTTP request timed out: {describe(request)}",
                package_type=_PACKAGE,
                method="send",
                cause=exc,
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                f"HTTP transport failure for {describe(request)}: {exc}",
                package_type=_PACKAGE,
                method="send",
                cause=exc,
            ) from exc


__all__ = ["HttpxSender"]
