"""Cancellable delayed callbacks.

The simulation driver and the filter debouncers only ever need
"run this once after N seconds, unless cancelled first". Modelling that
as an explicit handle (rather than a sleeping task) keeps the
single-timer bookkeeping trivial and lets tests drive time by hand.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, Protocol, TypeVar, cast

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """:class:`Scheduler` backed by an asyncio event loop.

    When no loop is given the *running* loop is looked up on every call,
    so scheduling outside of a running loop raises ``RuntimeError``.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)


class Debouncer(Generic[T]):
    """Collapse bursts of calls into a single delayed callback.

    Each :meth:`trigger` replaces the pending value and re-arms the timer;
    the callback runs once with the last value after *delay* seconds of
    quiet. At most one timer is outstanding at any time.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        delay: float,
        callback: Callable[[T], None],
        *,
        name: str = "debounce",
    ) -> None:
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._name = name
        self._handle: TimerHandle | None = None
        self._value: T | None = None

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, value: T) -> None:
        self.cancel()
        self._value = value
        self._handle = self._scheduler.call_later(self._delay, self._fire)

    def cancel(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()

    def flush(self) -> None:
        """Run the pending callback now (no-op when nothing is pending)."""
        if self._handle is None:
            return
        self.cancel()
        self._run()

    def _fire(self) -> None:
        self._handle = None
        self._run()

    def _run(self) -> None:
        value = cast(T, self._value)
        self._value = None
        try:
            self._callback(value)
        except Exception:
            _logger.warning("%s callback failed", self._name, exc_info=True)
