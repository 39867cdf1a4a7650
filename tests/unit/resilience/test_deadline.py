"""Unit tests – deadline propagation and deadline-aware waiting."""
import asyncio
import time

import pytest

from mp_autorest.resilience import (
    Deadline,
    DeadlineContext,
    DeadlineExceededError,
    deadline_aware,
    sleep,
)


class TestDeadline:
    def test_after_in_future(self):
        dl = Deadline.after(seconds=60)
        assert not dl.is_expired
        assert 0 < dl.remaining_seconds <= 60

    def test_expired_has_no_time_left(self):
        dl = Deadline.after(seconds=-1)
        assert dl.is_expired
        assert dl.remaining_seconds == 0.0
        with pytest.raises(DeadlineExceededError):
            dl.raise_if_expired()


class TestDeadlineContext:
    def test_set_and_reset(self):
        dl = Deadline.after(seconds=5)
        token = DeadlineContext.set(dl)
        try:
            assert DeadlineContext.get() is dl
        finally:
            DeadlineContext.reset(token)

    def test_scoped_restores_previous(self):
        async def run():
            before = DeadlineContext.get()
            dl = Deadline.after(seconds=10)
            async with DeadlineContext.scoped(dl) as scoped:
                assert scoped is dl
                assert DeadlineContext.get() is dl
            assert DeadlineContext.get() is before

        asyncio.run(run())

    def test_raise_if_exceeded(self):
        token = DeadlineContext.set(Deadline.after(seconds=-1))
        try:
            with pytest.raises(DeadlineExceededError):
                DeadlineContext.raise_if_exceeded()
        finally:
            DeadlineContext.reset(token)


class TestSleep:
    def test_plain_sleep_without_deadline(self):
        started = time.monotonic()
        asyncio.run(sleep(0.02))
        assert time.monotonic() - started >= 0.015

    def test_negative_is_zero(self):
        asyncio.run(sleep(-5))

    def test_interrupted_by_explicit_deadline(self):
        started = time.monotonic()
        with pytest.raises(DeadlineExceededError):
            asyncio.run(sleep(10, Deadline.after(0.02)))
        assert time.monotonic() - started < 5

    def test_interrupted_by_context_deadline(self):
        async def run():
            async with DeadlineContext.scoped(Deadline.after(0.02)):
                await sleep(10)

        with pytest.raises(DeadlineExceededError):
            asyncio.run(run())

    def test_already_expired(self):
        with pytest.raises(DeadlineExceededError):
            asyncio.run(sleep(0, Deadline.after(-1)))

    def test_cancellation_interrupts(self):
        async def run():
            task = asyncio.create_task(sleep(10))
            await asyncio.sleep(0.01)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(run())


class TestDeadlineAware:
    def test_completes_within_deadline(self):
        async def work():
            return 42

        assert asyncio.run(deadline_aware(work(), Deadline.after(5))) == 42

    def test_no_deadline_runs_to_completion(self):
        async def work():
            return "done"

        assert asyncio.run(deadline_aware(work())) == "done"

    def test_times_out(self):
        async def slow():
            await asyncio.sleep(10)

        with pytest.raises(DeadlineExceededError):
            asyncio.run(deadline_aware(slow(), Deadline.after(0.02)))

    def test_already_expired_never_starts(self):
        started = []

        async def work():
            started.append(True)

        with pytest.raises(DeadlineExceededError):
            asyncio.run(deadline_aware(work(), Deadline.after(-1)))
        assert started == []
