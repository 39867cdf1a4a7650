"""Testing support – fakes for senders, authorizers and clocks.

Usage::

    from mp_autorest.testing import FakeSender, new_response
"""

from mp_autorest.testing.fakes import (
    DEFAULT_URL,
    FailingAuthorizer,
    FakeAuthorizer,
    FakeClock,
    FakeSender,
    FrozenClock,
    TrackingStream,
    new_request,
    new_response,
    stream_of,
)

__all__ = [
    "DEFAULT_URL",
    "FailingAuthorizer",
    "FakeAuthorizer",
    "FakeClock",
    "FakeSender",
    "FrozenClock",
    "TrackingStream",
    "new_request",
    "new_response",
    "stream_of",
]
