"""Deferred callbacks for narrative pacing.

The engine never sleeps. Delayed narration and ambient events are handed
to a Scheduler as cancellable callbacks:

  AsyncioScheduler  runs on the asyncio event loop via loop.call_later
  ManualScheduler   virtual clock for tests; nothing fires until advance()

Callbacks are plain synchronous functions. Error handling is the
caller's job (the engine wraps every callback it schedules).

AsyncioScheduler needs an event loop: either one passed in, or one
running when call_later() is made. Without one it raises SchedulerError.
Synchronous callers should pass a ManualScheduler.
"""

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class SchedulerError(RuntimeError):
    """Raised when a callback cannot be scheduled."""


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...

    @property
    def cancelled(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask: ...


class _AsyncioTask:
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler:
    """Schedule on a given loop, or on the loop running at call time."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerError(
                    "AsyncioScheduler needs a running event loop; pass loop= or use ManualScheduler"
                ) from e
        return _AsyncioTask(loop.call_later(max(0.0, delay), callback))


class ManualTask:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler:
    """Virtual-time scheduler. Tasks due at the same instant fire in scheduling order."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, ManualTask]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (task.when, next(self._counter), task))
        return task

    @property
    def pending(self) -> list[ManualTask]:
        return [task for _, _, task in sorted(self._queue) if not task.cancelled]

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every task that falls due. Returns the number fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, task = heapq.heappop(self._queue)
            self.now = when
            if task.cancelled:
                continue
            task.callback()
            fired += 1
        self.now = target
        return fired

    def run_all(self) -> int:
        """Fire everything queued, including tasks scheduled by callbacks."""
        fired = 0
        while self._queue:
            when, _, task = heapq.heappop(self._queue)
            self.now = max(self.now, when)
            if task.cancelled:
                continue
            task.callback()
            fired += 1
        return fired
