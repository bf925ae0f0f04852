"""Tests for the autosave debouncer and schedulers."""

import asyncio

import pytest

from pagecraft.editor.autosave import AsyncioScheduler, Debouncer


class TestDebouncer:
    """Tests for Debouncer."""

    def test_fires_after_delay(self, scheduler):
        """Test a single schedule fires once."""
        calls = []
        debouncer = Debouncer(1.0, lambda: calls.append(scheduler.now), scheduler)

        debouncer.schedule()
        scheduler.advance(0.5)
        assert calls == []
        assert debouncer.pending

        scheduler.advance(0.5)
        assert calls == [1.0]
        assert not debouncer.pending

    def test_reschedule_coalesces(self, scheduler):
        """A second schedule restarts the delay."""
        calls = []
        debouncer = Debouncer(1.0, lambda: calls.append(scheduler.now), scheduler)

        debouncer.schedule()
        scheduler.advance(0.2)
        debouncer.schedule()
        scheduler.advance(5)

        assert calls == [pytest.approx(1.2)]
        assert len(scheduler.pending) == 0

    def test_cancel(self, scheduler):
        """Test cancel reports whether a call was pending."""
        calls = []
        debouncer = Debouncer(1.0, lambda: calls.append(True), scheduler)

        assert debouncer.cancel() is False
        debouncer.schedule()
        assert debouncer.cancel() is True

        scheduler.advance(2)
        assert calls == []


class TestAsyncioScheduler:
    """Tests for the asyncio-backed scheduler."""

    @pytest.mark.asyncio
    async def test_call_later(self):
        """Test a debounced call on the running loop."""
        fired = asyncio.Event()
        debouncer = Debouncer(0.01, fired.set, AsyncioScheduler())

        debouncer.schedule()
        await asyncio.wait_for(fired.wait(), timeout=1)

        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_dispatch(self):
        """Test background coroutines run as tasks."""
        async def work():
            return 42

        future = AsyncioScheduler().dispatch(work())

        assert await future == 42
