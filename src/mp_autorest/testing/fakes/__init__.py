"""Testing fakes – in-memory doubles for the pipeline's ports."""
from mp_autorest.testing.fakes.auth import FailingAuthorizer, FakeAuthorizer
from mp_autorest.testing.fakes.clock import FakeClock
from mp_autorest.testing.fakes.http import (
    DEFAULT_URL,
    FakeSender,
    TrackingStream,
    new_request,
    new_response,
    stream_of,
)
from mp_autorest.kernel.time import FrozenClock

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
