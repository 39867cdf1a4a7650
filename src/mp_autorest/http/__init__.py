"""HTTP pipeline – prepare → send → respond, retry and long-running operation polling."""
from mp_autorest.http.authorizer import Authorizer, BearerAuthorizer, NullAuthorizer
from mp_autorest.http.body import close_response
from mp_autorest.http.client import Client
from mp_autorest.http.constants import (
    DEFAULT_POLLING_ATTEMPTS,
    DEFAULT_POLLING_CODES,
    DEFAULT_POLLING_DELAY,
    DEFAULT_POLLING_DURATION,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_LOCATION,
    HEADER_RETRY_AFTER,
    HEADER_USER_AGENT,
)
from mp_autorest.http.polling import (
    Poller,
    PollingState,
    PollingStatus,
    get_polling_delay,
    get_polling_location,
    new_polling_request,
    poll_for_attempts,
    poll_for_duration,
    response_requires_polling,
)
from mp_autorest.http.preparer import (
    PrepareDecorator,
    Preparer,
    PreparerFunc,
    as_content_type,
    as_delete,
    as_get,
    as_head,
    as_json,
    as_method,
    as_patch,
    as_post,
    as_put,
    decorate_preparer,
    prepare,
    with_base_url,
    with_bearer_authorization,
    with_bytes,
    with_header,
    with_json,
    with_path,
    with_path_parameters,
    with_query_parameters,
    with_text,
    with_user_agent,
)
from mp_autorest.http.responder import (
    RespondDecorator,
    Responder,
    ResponderFunc,
    by_closing,
    by_closing_if_error,
    by_ignoring,
    by_unmarshalling_json,
    by_unmarshalling_xml,
    decorate_responder,
    respond,
    with_error_unless_ok,
    with_error_unless_status_code,
)
from mp_autorest.http.sender import (
    SendDecorator,
    Sender,
    SenderFunc,
    after_delay,
    as_is,
    backoff_delay,
    decorate_sender,
    delay_for_backoff,
    do_close_if_error,
    do_error_if_status_code,
    do_error_unless_status_code,
    do_retry_for_attempts,
    do_retry_for_duration,
    response_has_status_code,
    send_with_sender,
    with_logging,
)
from mp_autorest.http.settings import ClientSettings, PollingMode
from mp_autorest.http.transport import HttpxSender

__all__ = [
    "Authorizer",
    "BearerAuthorizer",
    "Client",
    "ClientSettings",
    "DEFAULT_POLLING_ATTEMPTS",
    "DEFAULT_POLLING_CODES",
    "DEFAULT_POLLING_DELAY",
    "DEFAULT_POLLING_DURATION",
    "HEADER_AUTHORIZATION",
    "HEADER_CONTENT_TYPE",
    "HEADER_LOCATION",
    "HEADER_RETRY_AFTER",
    "HEADER_USER_AGENT",
    "HttpxSender",
    "NullAuthorizer",
    "Poller",
    "PollingMode",
    "PollingState",
    "PollingStatus",
    "PrepareDecorator",
    "Preparer",
    "PreparerFunc",
    "RespondDecorator",
    "Responder",
    "ResponderFunc",
    "SendDecorator",
    "Sender",
    "SenderFunc",
    "after_delay",
    "as_content_type",
    "as_delete",
    "as_get",
    "as_head",
    "as_is",
    "as_json",
    "as_method",
    "as_patch",
    "as_post",
    "as_put",
    "backoff_delay",
    "by_closing",
    "by_closing_if_error",
    "by_ignoring",
    "by_unmarshalling_json",
    "by_unmarshalling_xml",
    "close_response",
    "decorate_preparer",
    "decorate_responder",
    "decorate_sender",
    "delay_for_backoff",
    "do_close_if_error",
    "do_error_if_status_code",
    "do_error_unless_status_code",
    "do_retry_for_attempts",
    "do_retry_for_duration",
    "get_polling_delay",
    "get_polling_location",
    "new_polling_request",
    "poll_for_attempts",
    "poll_for_duration",
    "prepare",
    "respond",
    "response_has_status_code",
    "response_requires_polling",
    "send_with_sender",
    "with_base_url",
    "with_bearer_authorization",
    "with_bytes",
    "with_error_unless_ok",
    "with_error_unless_status_code",
    "with_header",
    "with_json",
    "with_logging",
    "with_path",
    "with_path_parameters",
    "with_query_parameters",
    "with_text",
    "with_user_agent",
]
