"""Unit tests – Client: authorization, inspection, retries and polling."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from mp_autorest.http import (
    Client,
    ClientSettings,
    Responder,
    ResponderFunc,
    RespondDecorator,
    with_header,
)
from mp_autorest.kernel.errors import StatusCodeError
from mp_autorest.resilience import Deadline, DeadlineExceededError
from mp_autorest.testing import FakeAuthorizer, FakeSender, new_request, new_response, stream_of

OPERATION_URL = "https://example.com/operations/1"


def _fast_settings(**overrides: object) -> ClientSettings:
    values: dict[str, object] = {"polling_delay": 0.0, "retry_backoff": 0.0}
    values.update(overrides)
    return ClientSettings(**values)  # type: ignore[arg-type]


def _recording_inspector(seen: list[int]) -> RespondDecorator:
    def decorator(responder: Responder) -> Responder:
        async def _respond(response: httpx.Response) -> None:
            seen.append(response.status_code)
            await responder.respond(response)

        return ResponderFunc(_respond)

    return decorator


# ---------------------------------------------------------------------------
# Client.send
# ---------------------------------------------------------------------------

class TestClientSend:
    def test_adds_user_agent_and_authorization(self) -> None:
        sender = FakeSender()
        client = Client(sender, authorizer=FakeAuthorizer("tok"), settings=_fast_settings(user_agent="svc/2.0"))

        asyncio.run(client.send(new_request()))

        sent = sender.last_request
        assert sent.headers["User-Agent"] == "svc/2.0"
        assert sent.headers["Authorization"] == "Bearer tok"

    def test_keeps_caller_user_agent(self) -> None:
        sender = FakeSender()
        client = Client(sender, settings=_fast_settings())

        asyncio.run(client.send(new_request(headers={"User-Agent": "caller/1"})))
        assert sender.last_request.headers["User-Agent"] == "caller/1"

    def test_runs_inspectors(self) -> None:
        sender = FakeSender()
        seen: list[int] = []
        client = Client(
            sender,
            request_inspector=with_header("X-Inspected", "yes"),
            response_inspector=_recording_inspector(seen),
        )

        response = asyncio.run(client.send(new_request()))

        assert sender.last_request.headers["X-Inspected"] == "yes"
        assert seen == [200]
        assert not response.is_closed

    def test_failing_inspector_closes_response(self) -> None:
        def _refusing(responder: Responder) -> Responder:
            async def _respond(response: httpx.Response) -> None:
                raise RuntimeError("inspector refused")

            return ResponderFunc(_respond)

        sender = FakeSender()
        client = Client(sender, response_inspector=_refusing)

        with pytest.raises(RuntimeError, match="inspector refused"):
            asyncio.run(client.send(new_request()))
        assert stream_of(sender.responses[0]).close_count == 1

    def test_expired_deadline_stops_send(self) -> None:
        sender = FakeSender()
        client = Client(sender, deadline=Deadline.after(-1))

        with pytest.raises(DeadlineExceededError):
            asyncio.run(client.send(new_request()))
        assert sender.attempts == 0


# ---------------------------------------------------------------------------
# Client.send_request
# ---------------------------------------------------------------------------

class TestClientSendRequest:
    def test_returns_successful_response(self) -> None:
        sender = FakeSender()
        client = Client(sender, settings=_fast_settings())

        response = asyncio.run(client.send_request(new_request()))
        assert response.status_code == 200

    def test_retries_transport_failures(self) -> None:
        sender = FakeSender()
        sender.emit_errors(2)
        client = Client(sender, settings=_fast_settings(retry_attempts=3))

        response = asyncio.run(client.send_request(new_request()))
        assert response.status_code == 200
        assert sender.attempts == 3

    def test_unexpected_status_closes_every_response(self) -> None:
        sender = FakeSender()
        sender.emit_status(404)
        client = Client(sender, settings=_fast_settings(retry_attempts=2))

        with pytest.raises(StatusCodeError):
            asyncio.run(client.send_request(new_request()))
        assert sender.attempts == 2
        assert [stream_of(r).close_count for r in sender.responses] == [1, 1]

    def test_accepted_response_is_polled(self) -> None:
        sender = FakeSender()
        sender.append_response(new_response(202, headers={"Location": OPERATION_URL}))
        sender.append_response(new_response(202))
        sender.append_response(new_response(200, b"{}"))
        client = Client(sender, authorizer=FakeAuthorizer("tok"), settings=_fast_settings())

        response = asyncio.run(client.send_request(new_request()))

        assert response.status_code == 200
        assert sender.attempts == 3
        assert str(sender.requests[1].url) == OPERATION_URL
        assert sender.requests[1].headers["Authorization"] == "Bearer tok"
        assert stream_of(sender.responses[0]).close_count == 1
        assert stream_of(sender.responses[1]).close_count == 1

    def test_duration_mode_polls_until_budget(self) -> None:
        sender = FakeSender()
        sender.append_response(new_response(202, headers={"Location": OPERATION_URL}))
        sender.emit_status(202)
        client = Client(sender, settings=_fast_settings(polling_mode="duration", polling_duration=0.05, polling_delay=0.01))

        response = asyncio.run(client.send_request(new_request()))
        assert response.status_code == 202
        assert sender.open_responses() == [response]


class TestPollAsNeeded:
    def test_non_accepted_response_returned_unchanged(self) -> None:
        client = Client(FakeSender(), settings=_fast_settings())
        response = new_response(200)
        assert asyncio.run(client.poll_as_needed(response)) is response

    def test_attempts_mode_respects_budget(self) -> None:
        sender = FakeSender()
        sender.emit_status(202)
        client = Client(sender, settings=_fast_settings(polling_attempts=2))

        response = asyncio.run(client.poll_as_needed(new_response(202, headers={"Location": OPERATION_URL})))
        assert response.status_code == 202
        assert sender.attempts == 2
