"""Timers for the editor: an injectable scheduler and a debouncer on top of it."""
import asyncio
import inspect
from typing import Any, Callable, Optional, Protocol, Set


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs ``callback`` once after ``delay`` seconds unless cancelled."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Scheduler backed by the running event loop.

    Callbacks that return an awaitable are started as tasks; references to
    those tasks are kept until they finish.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._tasks: Set[asyncio.Future] = set()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, self._run, callback)

    def _run(self, callback: Callable[[], Any]):
        result = callback()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)


class Debouncer:
    """Delay-and-coalesce: only the last ``trigger()`` in a quiet period fires."""

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], Any]):
        self.scheduler = scheduler
        self.delay = delay
        self.callback = callback
        self._handle: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self):
        """(Re)start the timer."""
        self.cancel()
        self._handle = self.scheduler.call_later(self.delay, self._fire)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self):
        self._handle = None
        return self.callback()
