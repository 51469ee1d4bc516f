"""One-shot timers used for reconnects, debouncing and entrance staggering."""

from __future__ import annotations

import abc
import asyncio
import heapq
import itertools
import logging
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class TimerHandle(abc.ABC):
    """Cancellable handle for a scheduled callback."""

    @abc.abstractmethod
    def cancel(self) -> None:
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def cancelled(self) -> bool:
        raise NotImplementedError


class BaseScheduler(metaclass=abc.ABCMeta):
    """Schedules callbacks to run once after a delay in seconds."""

    @abc.abstractmethod
    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        raise NotImplementedError


class _AsyncioTimer(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(BaseScheduler):
    """Scheduler backed by the running event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTimer(loop.call_later(delay, callback))


class _VirtualTimer(TimerHandle):
    def __init__(self, due: float, callback: Callback) -> None:
        self.due = due
        self.callback = callback
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class VirtualScheduler(BaseScheduler):
    """Deterministic scheduler driven by :meth:`advance`.

    Useful for tests and scripted playback where wall-clock waits are not
    wanted. Callbacks due at the same time fire in scheduling order.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, _VirtualTimer]] = []
        self._counter = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        timer = _VirtualTimer(self.now + max(0.0, delay), callback)
        heapq.heappush(self._queue, (timer.due, next(self._counter), timer))
        return timer

    @property
    def pending(self) -> int:
        """Number of timers that have not fired or been cancelled."""
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks. Returns how many fired."""
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            self.now = due
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        self.now = target
        return fired


class Debouncer:
    """Collapse a burst of triggers into one callback after a quiet period."""

    def __init__(self, scheduler: BaseScheduler, delay: float, callback: Callback) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._timer: Optional[TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    def trigger(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        self._timer = None
        self._callback()
