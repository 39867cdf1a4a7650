"""Azure – service error classifier, request id headers and token persistence."""
from mp_autorest.azure.errors import (
    RequestError,
    ServiceError,
    is_azure_error,
    new_error_with_error,
    with_error_unless_status_code,
)
from mp_autorest.azure.headers import (
    HEADER_CLIENT_ID,
    HEADER_REQUEST_ID,
    HEADER_RETURN_CLIENT_ID,
    extract_client_id,
    extract_request_id,
    with_client_id,
    with_return_client_id,
    with_returning_client_id,
)
from mp_autorest.azure.token import Token, load_token, save_token

__all__ = [
    "HEADER_CLIENT_ID",
    "HEADER_REQUEST_ID",
    "HEADER_RETURN_CLIENT_ID",
    "RequestError",
    "ServiceError",
    "Token",
    "extract_client_id",
    "extract_request_id",
    "is_azure_error",
    "load_token",
    "new_error_with_error",
    "save_token",
    "with_client_id",
    "with_error_unless_status_code",
    "with_return_client_id",
    "with_returning_client_id",
]
