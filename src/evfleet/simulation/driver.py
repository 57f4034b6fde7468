"""Periodic simulation driver.

Owns the one and only simulation timer. Every tick re-arms the next tick
and then asks the vehicle store to refresh all active vehicles.
"""

from __future__ import annotations

import logging

from evfleet._constants import (
    DEFAULT_SIMULATION_INTERVAL_MS,
    SIMULATION_RESTART_DELAY_S,
    clamp_interval_ms,
)
from evfleet._scheduling import LoopScheduler, Scheduler, TimerHandle
from evfleet.exceptions import SimulationError
from evfleet.state.events import ChangeKind, StoreChange
from evfleet.state.store import VehicleStore

_logger = logging.getLogger(__name__)


class SimulationDriver:
    """Start/stop controller for the telemetry simulation.

    Invariants:

    * at most one tick timer is outstanding; :meth:`start` always cancels
      the previous timer (and any pending restart) before arming a new one
    * the interval is clamped to ``[1000, 5000]`` ms, never rejected
    * failures while starting or stopping land in :attr:`error` instead of
      propagating, and an exception inside a tick never escapes it

    The driver also follows the store's ``simulation_enabled`` flag, so
    flipping the flag on the store starts or stops the timer.
    """

    def __init__(
        self,
        store: VehicleStore,
        *,
        scheduler: Scheduler | None = None,
        interval_ms: float = DEFAULT_SIMULATION_INTERVAL_MS,
        restart_delay: float = SIMULATION_RESTART_DELAY_S,
    ) -> None:
        self._store = store
        self._scheduler = scheduler or LoopScheduler()
        self._interval_ms = clamp_interval_ms(interval_ms)
        self._restart_delay = restart_delay
        self._timer: TimerHandle | None = None
        self._restart: TimerHandle | None = None
        self._error: SimulationError | None = None
        self._tick_count = 0
        self._closed = False
        self._unsubscribe = store.subscribe(self._on_store_change)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        """``True`` while ticking, including the settle gap after an interval change."""
        return self._timer is not None or self._restart is not None

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def error(self) -> str | None:
        return str(self._error) if self._error is not None else None

    @property
    def last_exception(self) -> SimulationError | None:
        return self._error

    def clear_error(self) -> None:
        self._error = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._closed:
            self._record_error("Failed to start simulation", RuntimeError("driver is closed"))
            return
        try:
            self._cancel_restart()
            self._cancel_timer()
            self._timer = self._scheduler.call_later(self._interval_ms / 1000, self._tick)
        except Exception as exc:
            self._timer = None
            self._record_error("Failed to start simulation", exc)
            return
        self._error = None
        _logger.debug("Simulation started interval_ms=%d", self._interval_ms)
        self._store.set_simulation_enabled(True)

    def stop(self) -> None:
        try:
            self._cancel_restart()
            self._cancel_timer()
        except Exception as exc:
            self._record_error("Failed to stop simulation", exc)
            return
        self._error = None
        _logger.debug("Simulation stopped after %d tick(s)", self._tick_count)
        self._store.set_simulation_enabled(False)

    def toggle(self) -> None:
        if self.is_running:
            self.stop()
        else:
            self.start()

    def set_interval(self, interval_ms: float) -> int:
        """Set the tick period (clamped) and return the effective value.

        When running, the current timer is cancelled and a fresh one is
        armed after a short settle delay.
        """
        self._interval_ms = clamp_interval_ms(interval_ms)
        if not self.is_running or self._closed:
            return self._interval_ms

        try:
            self._cancel_restart()
            self._cancel_timer()
            self._restart = self._scheduler.call_later(self._restart_delay, self._restart_now)
        except Exception as exc:
            self._restart = None
            self._record_error("Failed to restart simulation", exc)
            self._store.set_simulation_enabled(False)
        return self._interval_ms

    def close(self) -> None:
        """Cancel every outstanding callback and detach from the store."""
        if self._closed:
            return
        self._closed = True
        self._cancel_restart()
        self._cancel_timer()
        self._unsubscribe()
        _logger.debug("Simulation driver closed")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()

    def _cancel_restart(self) -> None:
        restart = self._restart
        self._restart = None
        if restart is not None:
            restart.cancel()

    def _restart_now(self) -> None:
        self._restart = None
        self.start()

    def _tick(self) -> None:
        self._timer = None
        try:
            self._timer = self._scheduler.call_later(self._interval_ms / 1000, self._tick)
        except Exception as exc:
            self._record_error("Failed to schedule next simulation tick", exc)
            self._store.set_simulation_enabled(False)

        self._tick_count += 1
        try:
            self._store.update_all_active_telemetry()
        except Exception:
            _logger.warning("Simulation tick %d failed", self._tick_count, exc_info=True)

    def _record_error(self, message: str, exc: BaseException) -> None:
        error = SimulationError(f"{message}: {exc}")
        error.__cause__ = exc
        self._error = error
        _logger.warning("%s", error, exc_info=exc)

    def _on_store_change(self, change: StoreChange) -> None:
        if change.kind != ChangeKind.SIMULATION or self._closed:
            return
        enabled = self._store.simulation_enabled
        if enabled and not self.is_running:
            self.start()
        elif not enabled and self.is_running:
            self.stop()
