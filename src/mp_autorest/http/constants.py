"""HTTP pipeline – well-known header names and default values."""
from __future__ import annotations

HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_LOCATION = "Location"
HEADER_RETRY_AFTER = "Retry-After"
HEADER_USER_AGENT = "User-Agent"

MIME_JSON = "application/json; charset=utf-8"
MIME_TEXT = "text/plain; charset=utf-8"
MIME_OCTET_STREAM = "application/octet-stream"

DEFAULT_POLLING_CODES: tuple[int, ...] = (202,)
DEFAULT_POLLING_DELAY = 60.0
DEFAULT_POLLING_DURATION = 15 * 60.0
DEFAULT_POLLING_ATTEMPTS = 10
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BACKOFF = 1.0

__all__ = [
    "DEFAULT_POLLING_ATTEMPTS",
    "DEFAULT_POLLING_CODES",
    "DEFAULT_POLLING_DELAY",
    "DEFAULT_POLLING_DURATION",
    "DEFAULT_RETRY_ATTEMPTS",
    "DEFAULT_RETRY_BACKOFF",
    "HEADER_AUTHORIZATION",
    "HEADER_CONTENT_TYPE",
    "HEADER_LOCATION",
    "HEADER_RETRY_AFTER",
    "HEADER_USER_AGENT",
    "MIME_JSON",
    "MIME_OCTET_STREAM",
    "MIME_TEXT",
]
