"""HTTP pipeline – Authorizer capability."""
from __future__ import annotations

from typing import Callable, Protocol

import httpx

from mp_autorest.http.preparer import PrepareDecorator, Preparer, with_bearer_authorization


class Authorizer(Protocol):
    """Anything able to attach credentials to an outgoing request."""

    def with_authorization(self) -> PrepareDecorator: ...


class NullAuthorizer:
    """Authorizer that adds nothing and never fails."""

    def with_authorization(self) -> PrepareDecorator:
        def decorator(preparer: Preparer) -> Preparer:
            return preparer

        return decorator


class BearerAuthorizer:
    """Add ``Authorization: Bearer <token>``.

    *token* is either the token itself or a zero-argument callable returning
    the current one; the callable is invoked each time a request is prepared.
    """

    def __init__(self, token: str | Callable[[], str]) -> None:
        self._token = token

    def token(self) -> str:
        return self._token() if callable(self._token) else self._token

    def with_authorization(self) -> PrepareDecorator:
        def decorator(preparer: Preparer) -> Preparer:
            return _Bearer(self, preparer)

        return decorator


class _Bearer:
    def __init__(self, authorizer: BearerAuthorizer, inner: Preparer) -> None:
        self._authorizer = authorizer
        self._inner = inner

    def prepare(self, request: httpx.Request) -> httpx.Request:
        decorate = with_bearer_authorization(self._authorizer.token())
        return decorate(self._inner).prepare(request)


__all__ = ["Authorizer", "BearerAuthorizer", "NullAuthorizer"]
