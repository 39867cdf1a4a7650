"""Azure – structured service errors.

Azure services report failures as::

    {"error": {"code": "InternalError", "message": "..."}}

:func:`with_error_unless_status_code` turns such a body into a
:class:`RequestError`. A failure body in any other shape (an HTML error
page, say) produces no error at all and is left readable for the caller.
"""
from __future__ import annotations

import dataclasses
import json
from typing import Any

import httpx

from mp_autorest.azure.headers import extract_request_id
from mp_autorest.http.body import close_response, describe, request_of
from mp_autorest.http.responder import RespondDecorator, Responder, ResponderFunc
from mp_autorest.kernel.errors import DetailedError
from mp_autorest.observability.logging import get_logger

logger = get_logger(__name__)

_PACKAGE = "azure"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclasses.dataclass(frozen=True)
class ServiceError:
    """The ``error`` object of an Azure failure body."""

    code: str
    message: str
    target: str | None = None
    details: tuple[Any, ...] = ()

    @classmethod
    def from_body(cls, body: bytes) -> ServiceError | None:
        """Decode *body*; ``None`` unless its ``error`` member is an object.

        A missing or null ``code`` or ``message`` becomes an empty string.
        """
        try:
            data = json.loads(body)
        except ValueError:
            return None
        error = data.get("error") if isinstance(data, dict) else None
        if not isinstance(error, dict):
            return None
        target = error.get("target")
        details = error.get("details")
        return cls(
            code=_text(error.get("code")),
            message=_text(error.get("message")),
            target=target if isinstance(target, str) else None,
            details=tuple(details) if isinstance(details, list) else (),
        )

    def __str__(self) -> str:
        return f"Code={self.code!r} Message={self.message!r}"


class RequestError(DetailedError):
    """A failure the service described with a :class:`ServiceError`."""

    default_code = "azure_request_error"

    def __init__(
        self,
        message: str,
        *,
        service_error: ServiceError | None = None,
        request_id: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self._service_error = service_error
        self._request_id = request_id

    @property
    def service_error(self) -> ServiceError | None:
        return self._service_error

    @property
    def request_id(self) -> str:
        return self._request_id

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["request_id"] = self._request_id
        if self._service_error is not None:
            payload["service_error"] = dataclasses.asdict(self._service_error)
        return payload


def is_azure_error(err: BaseException | None) -> bool:
    return isinstance(err, RequestError)


def new_error_with_error(
    err: BaseException,
    package_type: str,
    method: str,
    response: httpx.Response | None = None,
    message: str = "",
) -> RequestError:
    """Wrap *err* in a :class:`RequestError`; a ``RequestError`` is returned unchanged."""
    if isinstance(err, RequestError):
        return err
    return RequestError(
        message or str(err),
        package_type=package_type,
        method=method,
        response=response,
        request_id=extract_request_id(response) if response is not None else "",
        cause=err,
    )


def with_error_unless_status_code(*codes: int) -> RespondDecorator:
    """Raise :class:`RequestError` when the status is not in *codes* and the body is an Azure error.

    The body is buffered before decoding and stays readable through
    ``response.content``. When a ``RequestError`` is raised the response is
    closed and the rest of the chain is skipped; otherwise the chain runs
    as usual.
    """

    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            if response.status_code in codes:
                await responder.respond(response)
                return
            try:
                body = await response.aread()
            except BaseException:
                await close_response(response)
                raise
            service_error = ServiceError.from_body(body)
            if service_error is None:
                logger.warning(
                    "azure.error_body.unparsed",
                    request=describe(request_of(response)),
                    status_code=response.status_code,
                    content_type=response.headers.get("content-type", ""),
                )
                await responder.respond(response)
                return
            await close_response(response)
            raise RequestError(
                f"{describe(request_of(response))} failed with status {response.status_code}: {service_error}",
                package_type=_PACKAGE,
                method="with_error_unless_status_code",
                response=response,
                service_error=service_error,
                request_id=extract_request_id(response),
            )

        return ResponderFunc(_respond)

    return decorator


__all__ = [
    "RequestError",
    "ServiceError",
    "is_azure_error",
    "new_error_with_error",
    "with_error_unless_status_code",
]
