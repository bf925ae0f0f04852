"""Single-slot debounce for autosave.

The editor is single-threaded and event driven; the only timer it owns is
the autosave debounce. Scheduling goes through a small ``Scheduler``
protocol so sessions run on an asyncio loop in production and on a manual
clock in tests.
"""

import asyncio
from typing import Any, Callable, Coroutine, Protocol

import structlog

logger = structlog.get_logger()


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Where delayed callbacks and background persistence run."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def dispatch(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Future: ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop (the running one by default)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)

    def dispatch(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Future:
        """Run a coroutine in the background; the caller is not blocked."""
        return self.loop.create_task(coro)


class Debouncer:
    """Delay-and-coalesce: each ``schedule()`` cancels the pending call.

    At most one timer is pending at a time.
    """

    def __init__(self, delay: float, callback: Callable[[], None], scheduler: Scheduler):
        self.delay = delay
        self._callback = callback
        self._scheduler = scheduler
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        self.cancel()
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def cancel(self) -> bool:
        """Cancel the pending call. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self) -> None:
        self._handle = None
        logger.debug("Autosave debounce elapsed", delay=self.delay)
        self._callback()
