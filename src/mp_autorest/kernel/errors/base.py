"""Kernel errors – BaseError."""

from __future__ import annotations

from typing import Any


class BaseError(Exception):
    """Root of the mp-autorest error hierarchy.

    ``str(error)`` is the human-readable message followed by the cause, if
    any; :meth:`to_dict` is the structured form handed to loggers.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def _cause_suffix(self) -> str:
        return f" -- Original Error: {self.cause}" if self.cause is not None else ""

    def __str__(self) -> str:
        return f"{self.message}{self._cause_suffix()}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.detail:
            payload["detail"] = self.detail
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
