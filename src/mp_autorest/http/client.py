"""HTTP pipeline – Client.

Bundles the pieces a service client needs for every call: the transport,
the authorizer, optional request/response inspectors and the retry and
polling settings. A :class:`Client` is itself a :class:`Sender`, so it can
be wrapped by any sender decorator.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

from mp_autorest.http.authorizer import Authorizer, NullAuthorizer
from mp_autorest.http.body import close_response
from mp_autorest.http.constants import HEADER_USER_AGENT
from mp_autorest.http.polling import Poller, get_polling_delay, new_polling_request, response_requires_polling
from mp_autorest.http.preparer import PrepareDecorator, Preparer, prepare, with_user_agent
from mp_autorest.http.responder import RespondDecorator, Responder, respond
from mp_autorest.http.sender import (
    Sender,
    do_close_if_error,
    do_error_unless_status_code,
    do_retry_for_attempts,
    send_with_sender,
)
from mp_autorest.http.settings import ClientSettings, PollingMode
from mp_autorest.observability.logging import get_logger
from mp_autorest.resilience.deadline import deadline_aware

if TYPE_CHECKING:
    from mp_autorest.resilience.deadline import Deadline

logger = get_logger(__name__)


def _pass_preparer(preparer: Preparer) -> Preparer:
    return preparer


def _pass_responder(responder: Responder) -> Responder:
    return responder


class Client:
    """Default pipeline for a service client.

    Parameters
    ----------
    sender:
        Transport used for every request (an :class:`HttpxSender` or a test
        double).
    authorizer:
        Attaches credentials; :class:`NullAuthorizer` when omitted.
    settings:
        Retry and polling budgets; :class:`ClientSettings` defaults when
        omitted.
    request_inspector / response_inspector:
        Decorators run on every outgoing request / incoming response.
    deadline:
        Bounds every :meth:`send`; the context deadline applies when omitted.
    """

    def __init__(
        self,
        sender: Sender,
        *,
        authorizer: Authorizer | None = None,
        settings: ClientSettings | None = None,
        request_inspector: PrepareDecorator | None = None,
        response_inspector: RespondDecorator | None = None,
        deadline: Deadline | None = None,
    ) -> None:
        self.sender = sender
        self.authorizer = authorizer or NullAuthorizer()
        self.settings = settings or ClientSettings()
        self.request_inspector = request_inspector
        self.response_inspector = response_inspector
        self.deadline = deadline

    def with_authorization(self) -> PrepareDecorator:
        return self.authorizer.with_authorization()

    def with_inspection(self) -> PrepareDecorator:
        return self.request_inspector or _pass_preparer

    def by_inspecting(self) -> RespondDecorator:
        return self.response_inspector or _pass_responder

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Authorize, inspect and deliver *request* once."""
        await request.aread()
        decorators = [self.with_inspection(), self.with_authorization()]
        if not request.headers.get(HEADER_USER_AGENT) and self.settings.user_agent:
            decorators.insert(0, with_user_agent(self.settings.user_agent))
        request = prepare(request, *decorators)
        response = await deadline_aware(self.sender.send(request), self.deadline)
        try:
            await respond(response, self.by_inspecting())
        except BaseException:
            await close_response(response)
            raise
        return response

    async def send_request(self, request: httpx.Request, *codes: int) -> httpx.Response:
        """Send with retries, require one of *codes* (200 by default) and poll when accepted.

        An accepted response is not a failure: the polling codes are always
        allowed and lead to :meth:`poll_as_needed`.
        """
        accepted = tuple(codes or (httpx.codes.OK,)) + tuple(self.settings.polling_codes)
        response = await send_with_sender(
            self,
            request,
            do_close_if_error(),
            do_retry_for_attempts(self.settings.retry_attempts, self.settings.retry_backoff),
            do_error_unless_status_code(*accepted),
        )
        return await self.poll_as_needed(response)

    async def poll_as_needed(self, response: httpx.Response, *codes: int) -> httpx.Response:
        """Poll *response*'s operation to completion when its status calls for it."""
        codes = codes or tuple(self.settings.polling_codes)
        if not response_requires_polling(response, *codes):
            return response
        delay = get_polling_delay(response, self.settings.polling_delay)
        request = await new_polling_request(response, self.authorizer)
        poller = Poller(self, request, delay, *codes, default_delay=self.settings.polling_delay)
        logger.info(
            "http.polling.started",
            url=str(request.url),
            mode=self.settings.mode.value,
            delay=delay,
        )
        if self.settings.mode is PollingMode.DURATION:
            return await poller.poll_for_duration(self.settings.polling_duration)
        return await poller.poll_for_attempts(self.settings.polling_attempts)


__all__ = ["Client"]
