"""HTTP pipeline – Responder stage.

A responder consumes a response: it validates it, decodes its body into a
caller-supplied target and closes it. The first decorator listed acts
first. Reading decorators buffer the body before delegating, so it stays
available through ``response.content`` even after :func:`by_closing` has
released the connection.

Typical use::

    result: dict = {}
    await respond(response, with_error_unless_ok(), by_unmarshalling_json(result), by_closing())
"""
from __future__ import annotations

import dataclasses
import json
import xml.etree.ElementTree as ET
from typing import Any, Awaitable, Callable, MutableMapping, MutableSequence, Protocol

import httpx

from mp_autorest.http.body import close_response, describe, request_of
from mp_autorest.kernel.errors import ResponseDecodeError, StatusCodeError

_PACKAGE = "autorest"


class Responder(Protocol):
    async def respond(self, response: httpx.Response) -> None: ...


@dataclasses.dataclass(frozen=True)
class ResponderFunc:
    """Adapt a coroutine function to the :class:`Responder` protocol."""

    func: Callable[[httpx.Response], Awaitable[None]]

    async def respond(self, response: httpx.Response) -> None:
        await self.func(response)


RespondDecorator = Callable[[Responder], Responder]


async def _done(response: httpx.Response) -> None:  # noqa: ARG001
    return None


_IDENTITY = ResponderFunc(_done)


def decorate_responder(responder: Responder, *decorators: RespondDecorator) -> Responder:
    """Wrap *responder*; the first decorator listed becomes the outermost."""
    for decorate in reversed(decorators):
        responder = decorate(responder)
    return responder


async def respond(response: httpx.Response, *decorators: RespondDecorator) -> None:
    await decorate_responder(_IDENTITY, *decorators).respond(response)


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


def by_ignoring() -> RespondDecorator:
    def decorator(responder: Responder) -> Responder:
        return responder

    return decorator


def by_closing() -> RespondDecorator:
    """Close the body once the rest of the chain has run, whatever its outcome."""

    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            try:
                await responder.respond(response)
            finally:
                await close_response(response)

        return ResponderFunc(_respond)

    return decorator


def by_closing_if_error() -> RespondDecorator:
    """Close the body only when the rest of the chain raises."""

    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            try:
                await responder.respond(response)
            except BaseException:
                await close_response(response)
                raise

        return ResponderFunc(_respond)

    return decorator


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _decode_error(response: httpx.Response, method: str, reason: str, cause: BaseException | None = None) -> ResponseDecodeError:
    return ResponseDecodeError(
        f"{describe(request_of(response))}: {reason}",
        package_type=_PACKAGE,
        method=method,
        response=response,
        cause=cause,
    )


def _merge(target: Any, data: Any, response: httpx.Response, method: str) -> None:
    if isinstance(target, MutableMapping) and isinstance(data, dict):
        target.update(data)
    elif isinstance(target, MutableSequence) and isinstance(data, list):
        target.extend(data)
    else:
        raise _decode_error(
            response, method, f"cannot store {type(data).__name__} into {type(target).__name__}"
        )


def by_unmarshalling_json(target: MutableMapping[str, Any] | MutableSequence[Any]) -> RespondDecorator:
    """Decode a JSON body into *target*; an empty body leaves it untouched."""

    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            body = await response.aread()
            if body.strip():
                try:
                    data = json.loads(body)
                except ValueError as exc:
                    raise _decode_error(response, "by_unmarshalling_json", "body is not valid JSON", exc) from exc
                _merge(target, data, response, "by_unmarshalling_json")
            await responder.respond(response)

        return ResponderFunc(_respond)

    return decorator


def _element_to_data(element: ET.Element) -> Any:
    children = list(element)
    if not children and not element.attrib:
        return (element.text or "").strip()
    data: dict[str, Any] = {f"@{name}": value for name, value in element.attrib.items()}
    for child in children:
        value = _element_to_data(child)
        if child.tag in data:
            existing = data[child.tag]
            if not isinstance(existing, list):
                data[child.tag] = existing = [existing]
            existing.append(value)
        else:
            data[child.tag] = value
    text = (element.text or "").strip()
    if text:
        data["#text"] = text
    return data


def by_unmarshalling_xml(target: MutableMapping[str, Any]) -> RespondDecorator:
    """Decode an XML body into *target* as ``{root_tag: content}``.

    Attributes become ``@name`` keys, repeated child elements become lists.
    """

    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            body = await response.aread()
            if body.strip():
                try:
                    root = ET.fromstring(body)
                except ET.ParseError as exc:
                    raise _decode_error(response, "by_unmarshalling_xml", "body is not valid XML", exc) from exc
                target[root.tag] = _element_to_data(root)
            await responder.respond(response)

        return ResponderFunc(_respond)

    return decorator


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def with_error_unless_status_code(*codes: int) -> RespondDecorator:
    """Raise :class:`StatusCodeError` for a status outside *codes*.

    On failure the body is buffered and closed before raising; the rest of
    the chain does not run. The error keeps the response so its content can
    still be inspected.
    """

    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            if response.status_code in codes:
                await responder.respond(response)
                return
            try:
                await response.aread()
            finally:
                await close_response(response)
            raise StatusCodeError(
                f"{describe(request_of(response))} returned unexpected status {response.status_code}",
                package_type=_PACKAGE,
                method="with_error_unless_status_code",
                response=response,
            )

        return ResponderFunc(_respond)

    return decorator


def with_error_unless_ok() -> RespondDecorator:
    return with_error_unless_status_code(httpx.codes.OK)


__all__ = [
    "RespondDecorator",
    "Responder",
    "ResponderFunc",
    "by_closing",
    "by_closing_if_error",
    "by_ignoring",
    "by_unmarshalling_json",
    "by_unmarshalling_xml",
    "decorate_responder",
    "respond",
    "with_error_unless_ok",
    "with_error_unless_status_code",
]
