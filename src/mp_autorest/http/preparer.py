"""HTTP pipeline – Preparer stage.

A preparer builds the outgoing :class:`httpx.Request`. Decorators wrap a
preparer and apply one change each; they run in the order they are listed
and any decorator raising stops the chain with its exception unchanged::

    request = prepare(
        None,
        as_post(),
        with_base_url("https://management.example.com/"),
        with_path("subscriptions/{id}"),
        with_json({"name": "x"}),
        authorizer.with_authorization(),
    )

Every body set here is buffered bytes, so a prepared request can be sent
any number of times.
"""
from __future__ import annotations

import dataclasses
import json
from typing import Any, Callable, Mapping, Protocol
from urllib.parse import quote

import httpx

from mp_autorest.http.constants import (
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HEADER_USER_AGENT,
    MIME_JSON,
    MIME_OCTET_STREAM,
    MIME_TEXT,
)
from mp_autorest.kernel.errors import PreparationError

_PACKAGE = "autorest"
_RECOMPUTED_HEADERS = frozenset({"host", "content-length", "transfer-encoding"})


class Preparer(Protocol):
    def prepare(self, request: httpx.Request) -> httpx.Request: ...


@dataclasses.dataclass(frozen=True)
class PreparerFunc:
    """Adapt a plain function to the :class:`Preparer` protocol."""

    func: Callable[[httpx.Request], httpx.Request]

    def prepare(self, request: httpx.Request) -> httpx.Request:
        return self.func(request)


PrepareDecorator = Callable[[Preparer], Preparer]

_IDENTITY = PreparerFunc(lambda request: request)


def decorate_preparer(preparer: Preparer, *decorators: PrepareDecorator) -> Preparer:
    """Wrap *preparer*; the first decorator listed becomes the outermost."""
    for decorate in reversed(decorators):
        preparer = decorate(preparer)
    return preparer


def prepare(request: httpx.Request | None, *decorators: PrepareDecorator) -> httpx.Request:
    """Run *request* (an empty GET when ``None``) through *decorators* in order."""
    if request is None:
        request = httpx.Request("GET", "")
    return decorate_preparer(_IDENTITY, *decorators).prepare(request)


def rebuild_request(
    request: httpx.Request,
    *,
    method: str | None = None,
    url: httpx.URL | str | None = None,
    content: bytes | None = None,
    headers: Mapping[str, str] | None = None,
) -> httpx.Request:
    """Return a copy of *request* with the given parts replaced.

    Host and Content-Length are recomputed from the new URL and body. The
    body of *request* must already be buffered.
    """
    if content is None:
        try:
            content = request.content
        except httpx.RequestNotRead as exc:
            raise PreparationError(
                "request body must be read before the request can be prepared",
                package_type=_PACKAGE,
                method="rebuild_request",
                cause=exc,
            ) from exc
    merged = httpx.Headers(
        [(k, v) for k, v in request.headers.multi_items() if k.lower() not in _RECOMPUTED_HEADERS]
    )
    for name, value in (headers or {}).items():
        merged[name] = value
    return httpx.Request(
        method or request.method,
        url if url is not None else request.url,
        headers=merged,
        content=content,
        extensions=request.extensions,
    )


def _modifying(func: Callable[[httpx.Request], httpx.Request]) -> PrepareDecorator:
    """Build a decorator that applies *func* before handing over to the next preparer."""

    def decorator(preparer: Preparer) -> Preparer:
        return PreparerFunc(lambda request: preparer.prepare(func(request)))

    return decorator


# ---------------------------------------------------------------------------
# Method
# ---------------------------------------------------------------------------


def as_method(method: str) -> PrepareDecorator:
    return _modifying(lambda request: rebuild_request(request, method=method.upper()))


def as_get() -> PrepareDecorator:
    return as_method("GET")


def as_post() -> PrepareDecorator:
    return as_method("POST")


def as_put() -> PrepareDecorator:
    return as_method("PUT")


def as_patch() -> PrepareDecorator:
    return as_method("PATCH")


def as_delete() -> PrepareDecorator:
    return as_method("DELETE")


def as_head() -> PrepareDecorator:
    return as_method("HEAD")


# ---------------------------------------------------------------------------
# URL
# ---------------------------------------------------------------------------


def parse_absolute_url(value: str, method: str) -> httpx.URL:
    """Parse *value*, requiring a scheme and a host."""
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError) as exc:
        raise PreparationError(
            f"invalid URL {value!r}", package_type=_PACKAGE, method=method, cause=exc
        ) from exc
    if not url.scheme or not url.host:
        raise PreparationError(
            f"URL {value!r} must be absolute (scheme and host)", package_type=_PACKAGE, method=method
        )
    return url


def with_base_url(base_url: str) -> PrepareDecorator:
    """Target *base_url*, which must be absolute."""

    def _apply(request: httpx.Request) -> httpx.Request:
        return rebuild_request(request, url=parse_absolute_url(base_url, "with_base_url"))

    return _modifying(_apply)


def with_path(path: str) -> PrepareDecorator:
    """Append *path* to the current URL path with exactly one separating slash."""

    def _apply(request: httpx.Request) -> httpx.Request:
        if not request.url.host:
            raise PreparationError(
                "with_path requires a URL; apply with_base_url first",
                package_type=_PACKAGE,
                method="with_path",
            )
        current = request.url.raw_path.split(b"?", 1)[0].decode("ascii")
        joined = current.rstrip("/") + "/" + path.lstrip("/")
        return rebuild_request(request, url=request.url.copy_with(path=joined))

    return _modifying(_apply)


def with_path_parameters(path: str, parameters: Mapping[str, Any]) -> PrepareDecorator:
    """Append *path* after substituting URL-escaped ``{name}`` placeholders."""
    escaped = {name: quote(str(value), safe="") for name, value in parameters.items()}
    try:
        rendered = path.format_map(escaped)
    except KeyError as exc:
        raise PreparationError(
            f"missing path parameter {exc.args[0]!r} for {path!r}",
            package_type=_PACKAGE,
            method="with_path_parameters",
        ) from exc
    return with_path(rendered)


def with_query_parameters(parameters: Mapping[str, Any]) -> PrepareDecorator:
    def _apply(request: httpx.Request) -> httpx.Request:
        params = {name: str(value) for name, value in parameters.items()}
        return rebuild_request(request, url=request.url.copy_merge_params(params))

    return _modifying(_apply)


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------


def with_header(name: str, value: str) -> PrepareDecorator:
    """Set header *name*, replacing any existing value."""
    return _modifying(lambda request: rebuild_request(request, headers={name: value}))


def with_user_agent(user_agent: str) -> PrepareDecorator:
    return with_header(HEADER_USER_AGENT, user_agent)


def as_content_type(content_type: str) -> PrepareDecorator:
    return with_header(HEADER_CONTENT_TYPE, content_type)


def as_json() -> PrepareDecorator:
    return as_content_type(MIME_JSON)


def with_bearer_authorization(token: str) -> PrepareDecorator:
    return with_header(HEADER_AUTHORIZATION, f"Bearer {token}")


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def with_bytes(content: bytes, content_type: str = MIME_OCTET_STREAM) -> PrepareDecorator:
    return _modifying(
        lambda request: rebuild_request(request, content=content, headers={HEADER_CONTENT_TYPE: content_type})
    )


def with_text(text: str) -> PrepareDecorator:
    return with_bytes(text.encode("utf-8"), MIME_TEXT)


def with_json(payload: Any) -> PrepareDecorator:
    """Serialise *payload* as the JSON request body."""
    try:
        content = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise PreparationError(
            f"payload of type {type(payload).__name__} is not JSON serialisable",
            package_type=_PACKAGE,
            method="with_json",
            cause=exc,
        ) from exc
    return with_bytes(content, MIME_JSON)


__all__ = [
    "PrepareDecorator",
    "Preparer",
    "PreparerFunc",
    "as_content_type",
    "as_delete",
    "as_get",
    "as_head",
    "as_json",
    "as_method",
    "as_patch",
    "as_post",
    "as_put",
    "decorate_preparer",
    "parse_absolute_url",
    "prepare",
    "rebuild_request",
    "with_base_url",
    "with_bearer_authorization",
    "with_bytes",
    "with_header",
    "with_json",
    "with_path",
    "with_path_parameters",
    "with_query_parameters",
    "with_text",
    "with_user_agent",
]
