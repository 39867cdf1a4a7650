"""Azure – client and request id headers."""
from __future__ import annotations

import httpx

from mp_autorest.http.preparer import PrepareDecorator, Preparer, with_header

HEADER_CLIENT_ID = "x-ms-client-request-id"
HEADER_RETURN_CLIENT_ID = "x-ms-return-client-request-id"
HEADER_REQUEST_ID = "x-ms-request-id"


def with_client_id(uuid: str) -> PrepareDecorator:
    """Tag the request with a caller-chosen client request id."""
    return with_header(HEADER_CLIENT_ID, uuid)


def with_return_client_id(enabled: bool) -> PrepareDecorator:
    """Ask the service to echo the client request id in its response."""
    return with_header(HEADER_RETURN_CLIENT_ID, "true" if enabled else "false")


def with_returning_client_id(uuid: str) -> PrepareDecorator:
    """Set the client request id and ask for it to be echoed back."""
    set_id = with_client_id(uuid)
    set_return = with_return_client_id(True)

    def decorator(preparer: Preparer) -> Preparer:
        return set_id(set_return(preparer))

    return decorator


def extract_client_id(response: httpx.Response) -> str:
    return response.headers.get(HEADER_CLIENT_ID, "")


def extract_request_id(response: httpx.Response) -> str:
    return response.headers.get(HEADER_REQUEST_ID, "")


__all__ = [
    "HEADER_CLIENT_ID",
    "HEADER_REQUEST_ID",
    "HEADER_RETURN_CLIENT_ID",
    "extract_client_id",
    "extract_request_id",
    "with_client_id",
    "with_return_client_id",
    "with_returning_client_id",
]
