"""Unit tests – Preparer composition and standard decorators."""
from __future__ import annotations

import json

import httpx
import pytest

from mp_autorest.http import (
    BearerAuthorizer,
    NullAuthorizer,
    PrepareDecorator,
    Preparer,
    PreparerFunc,
    as_delete,
    as_get,
    as_json,
    as_post,
    as_put,
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
from mp_autorest.http.constants import MIME_JSON, MIME_TEXT
from mp_autorest.kernel.errors import PreparationError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _recording(log: list[str], name: str) -> PrepareDecorator:
    def decorator(preparer: Preparer) -> Preparer:
        def _prepare(request: httpx.Request) -> httpx.Request:
            log.append(name)
            return preparer.prepare(request)

        return PreparerFunc(_prepare)

    return decorator


def _failing(error: Exception) -> PrepareDecorator:
    def decorator(preparer: Preparer) -> Preparer:  # noqa: ARG001
        def _prepare(request: httpx.Request) -> httpx.Request:
            raise error

        return PreparerFunc(_prepare)

    return decorator


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

class TestPrepareComposition:
    def test_none_starts_from_empty_get(self) -> None:
        request = prepare(None)
        assert request.method == "GET"

    def test_decorators_apply_in_listed_order(self) -> None:
        log: list[str] = []
        prepare(None, _recording(log, "a"), _recording(log, "b"), _recording(log, "c"))
        assert log == ["a", "b", "c"]

    def test_later_header_wins(self) -> None:
        request = prepare(None, with_header("X-Value", "first"), with_header("X-Value", "second"))
        assert request.headers.get_list("X-Value") == ["second"]

    def test_error_short_circuits_and_is_unchanged(self) -> None:
        log: list[str] = []
        error = PreparationError("boom")
        with pytest.raises(PreparationError) as info:
            prepare(None, _recording(log, "a"), _failing(error), _recording(log, "c"))
        assert info.value is error
        assert log == ["a"]

    def test_method_change_keeps_headers(self) -> None:
        request = prepare(None, with_header("X-Keep", "1"), as_post())
        assert request.method == "POST"
        assert request.headers["X-Keep"] == "1"

    def test_method_decorators(self) -> None:
        assert prepare(None, as_put()).method == "PUT"
        assert prepare(None, as_delete()).method == "DELETE"
        assert prepare(None, as_post(), as_get()).method == "GET"

    def test_unread_streaming_body_is_rejected(self) -> None:
        async def chunks():
            yield b"data"

        request = httpx.Request("POST", "https://example.com/", content=chunks())
        with pytest.raises(PreparationError):
            prepare(request, as_put())


# ---------------------------------------------------------------------------
# URL
# ---------------------------------------------------------------------------

class TestUrlDecorators:
    def test_base_url(self) -> None:
        request = prepare(None, with_base_url("https://management.example.com/base/"))
        assert str(request.url) == "https://management.example.com/base/"
        assert request.headers["Host"] == "management.example.com"

    def test_base_url_requires_absolute_url(self) -> None:
        with pytest.raises(PreparationError):
            prepare(None, with_base_url("not a url"))

    def test_with_path_joins_with_single_slash(self) -> None:
        request = prepare(None, with_base_url("https://example.com/base/"), with_path("/items/1"))
        assert request.url.path == "/base/items/1"

    def test_with_path_on_bare_host(self) -> None:
        request = prepare(None, with_base_url("https://example.com"), with_path("items"))
        assert request.url.path == "/items"

    def test_with_path_requires_base_url(self) -> None:
        with pytest.raises(PreparationError):
            prepare(None, with_path("items"))

    def test_path_parameters_are_escaped(self) -> None:
        request = prepare(
            None,
            with_base_url("https://example.com/"),
            with_path_parameters("subscriptions/{id}/groups/{group}", {"id": "a b", "group": 7}),
        )
        assert str(request.url) == "https://example.com/subscriptions/a%20b/groups/7"

    def test_missing_path_parameter(self) -> None:
        with pytest.raises(PreparationError):
            with_path_parameters("items/{id}", {})

    def test_query_parameters_merge(self) -> None:
        request = prepare(
            None,
            with_base_url("https://example.com/items?existing=1"),
            with_query_parameters({"api-version": "2016-01-01", "top": 5}),
        )
        assert request.url.params["existing"] == "1"
        assert request.url.params["api-version"] == "2016-01-01"
        assert request.url.params["top"] == "5"


# ---------------------------------------------------------------------------
# Headers and bodies
# ---------------------------------------------------------------------------

class TestHeaderAndBodyDecorators:
    def test_user_agent(self) -> None:
        assert prepare(None, with_user_agent("agent/1.0")).headers["User-Agent"] == "agent/1.0"

    def test_as_json_sets_content_type(self) -> None:
        assert prepare(None, as_json()).headers["Content-Type"] == MIME_JSON

    def test_with_json_body(self) -> None:
        request = prepare(None, as_post(), with_json({"name": "x", "count": 2}))
        assert json.loads(request.content) == {"name": "x", "count": 2}
        assert request.headers["Content-Type"] == MIME_JSON
        assert request.headers["Content-Length"] == str(len(request.content))

    def test_with_json_rejects_unserialisable_payload(self) -> None:
        with pytest.raises(PreparationError):
            with_json({"value": object()})

    def test_with_text_body(self) -> None:
        request = prepare(None, with_text("héllo"))
        assert request.content == "héllo".encode("utf-8")
        assert request.headers["Content-Type"] == MIME_TEXT

    def test_body_survives_later_decorators(self) -> None:
        request = prepare(None, with_bytes(b"\x00\x01"), with_base_url("https://example.com/"), as_put())
        assert request.content == b"\x00\x01"

    def test_bearer_authorization(self) -> None:
        request = prepare(None, with_bearer_authorization("secret"))
        assert request.headers["Authorization"] == "Bearer secret"


# ---------------------------------------------------------------------------
# Authorizers
# ---------------------------------------------------------------------------

class TestAuthorizers:
    def test_null_authorizer_changes_nothing(self) -> None:
        request = httpx.Request("GET", "https://example.com/")
        assert prepare(request, NullAuthorizer().with_authorization()) is request

    def test_bearer_authorizer_with_static_token(self) -> None:
        request = prepare(None, BearerAuthorizer("abc").with_authorization())
        assert request.headers["Authorization"] == "Bearer abc"

    def test_bearer_authorizer_callable_is_read_per_request(self) -> None:
        tokens = iter(["one", "two"])
        authorizer = BearerAuthorizer(lambda: next(tokens))
        decorate = authorizer.with_authorization()
        assert prepare(None, decorate).headers["Authorization"] == "Bearer one"
        assert prepare(None, decorate).headers["Authorization"] == "Bearer two"
