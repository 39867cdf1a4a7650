"""Pipeline errors – failures raised by preparer, sender and responder stages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mp_autorest.kernel.errors.base import BaseError

if TYPE_CHECKING:
    import httpx


class DetailedError(BaseError):
    """Error raised from a pipeline stage.

    Carries the package and operation that raised it and, when one exists,
    the response that triggered it. The response is not closed by the
    error; whoever catches the error owns the body.
    """

    default_code = "detailed_error"

    def __init__(
        self,
        message: str,
        *,
        package_type: str = "",
        method: str = "",
        response: httpx.Response | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.package_type = package_type
        self.method = method
        self.response = response
        if status_code is None and response is not None:
            status_code = response.status_code
        self.status_code = status_code

    def __str__(self) -> str:
        status = self.status_code if self.status_code is not None else "<nil>"
        return f"{self.package_type}#{self.method}: {self.message}: StatusCode={status}{self._cause_suffix()}"

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["package_type"] = self.package_type
        payload["method"] = self.method
        payload["status_code"] = self.status_code
        return payload


class PreparationError(DetailedError):
    """A preparer could not build the outgoing request."""

    default_code = "preparation_error"


class StatusCodeError(DetailedError):
    """A response arrived with a status code the caller declared a failure."""

    default_code = "unexpected_status_code"


class ResponseDecodeError(DetailedError):
    """A responder could not decode the response body."""

    default_code = "response_decode_error"


class PollingError(DetailedError):
    """A long-running operation could not be polled."""

    default_code = "polling_error"


__all__ = [
    "DetailedError",
    "PollingError",
    "PreparationError",
    "ResponseDecodeError",
    "StatusCodeError",
]
