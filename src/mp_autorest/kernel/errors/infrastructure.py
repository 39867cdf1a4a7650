"""Infrastructure errors – transport and file I/O failures."""

from __future__ import annotations

from typing import Any

from mp_autorest.kernel.errors.base import BaseError
from mp_autorest.kernel.errors.pipeline import DetailedError


class TransportError(DetailedError):
    """The transport failed to deliver the request (connection refused, reset, …)."""

    default_code = "transport_error"


class TransportTimeoutError(TransportError):
    """The transport gave up waiting for the remote end."""

    default_code = "transport_timeout"


class TokenError(BaseError):
    """A persisted token could not be read or written."""

    default_code = "token_error"

    def __init__(self, message: str, *, path: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.path = path


class TokenLoadError(TokenError):
    default_code = "token_load_error"


class TokenSaveError(TokenError):
    default_code = "token_save_error"


__all__ = [
    "TokenError",
    "TokenLoadError",
    "TokenSaveError",
    "TransportError",
    "TransportTimeoutError",
]
