"""Debounced two-slot filter state synchronized with navigation history.

``pending`` follows user input immediately. After ``settle_delay`` of
quiet it is copied to ``committed`` (the value the vehicle list is
filtered with), and after a further ``sync_delay`` of quiet the committed
value is pushed to the history as a query string.

Back/forward navigation flows the other way: the history entry is parsed
and overwrites both slots, cancelling any in-flight debounce so a stale
settle cannot clobber it. That path never writes back to the history.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from evfleet._constants import FILTER_SETTLE_DELAY_S, FILTER_SYNC_DELAY_S
from evfleet._scheduling import Debouncer, LoopScheduler, Scheduler
from evfleet.models.telemetry import ChargingStatus
from evfleet.models.vehicle import VehicleStatus
from evfleet.models.views import FilterState
from evfleet.sync.history import NavigationHistory
from evfleet.sync.query import parse_filters, serialize_filters
from evfleet.views.filters import clear_filters, toggle_charging, toggle_status

_logger = logging.getLogger(__name__)

FilterListener = Callable[[FilterState], None]


class FilterSync:
    def __init__(
        self,
        history: NavigationHistory | None = None,
        *,
        scheduler: Scheduler | None = None,
        settle_delay: float = FILTER_SETTLE_DELAY_S,
        sync_delay: float = FILTER_SYNC_DELAY_S,
    ) -> None:
        self._history = history if history is not None else NavigationHistory()
        scheduler = scheduler or LoopScheduler()
        initial = parse_filters(self._history.current)
        self._pending = initial
        self._committed = initial
        self._settle: Debouncer[FilterState] = Debouncer(scheduler, settle_delay, self._commit, name="filter settle")
        self._sync: Debouncer[FilterState] = Debouncer(
            scheduler, sync_delay, self._write_history, name="filter sync"
        )
        self._listeners: list[FilterListener] = []
        self._closed = False
        self._unsubscribe = self._history.subscribe(self._on_navigation)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def pending(self) -> FilterState:
        return self._pending

    @property
    def committed(self) -> FilterState:
        return self._committed

    @property
    def query(self) -> str:
        return serialize_filters(self._committed)

    @property
    def history(self) -> NavigationHistory:
        return self._history

    @property
    def is_settled(self) -> bool:
        return not self._settle.pending and not self._sync.pending

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def toggle_status(self, value: VehicleStatus | str) -> FilterState:
        return self._set_pending(toggle_status(self._pending, value))

    def toggle_charging(self, value: ChargingStatus | str) -> FilterState:
        return self._set_pending(toggle_charging(self._pending, value))

    def clear(self) -> FilterState:
        return self._set_pending(clear_filters())

    def flush(self) -> None:
        """Settle and sync right away instead of waiting for the debounces."""
        self._settle.flush()
        self._sync.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._settle.cancel()
        self._sync.cancel()
        self._unsubscribe()

    def subscribe(self, listener: FilterListener) -> Callable[[], None]:
        """Be told about every change of the committed filters."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_pending(self, filters: FilterState) -> FilterState:
        self._pending = filters
        if self._closed:
            _logger.debug("Filter input after close ignored for sync")
            return filters
        self._settle.trigger(filters)
        return filters

    def _commit(self, filters: FilterState) -> None:
        self._committed = filters
        _logger.debug("Filters committed %r", serialize_filters(filters))
        self._notify()
        self._sync.trigger(filters)

    def _write_history(self, filters: FilterState) -> None:
        query = serialize_filters(filters)
        if query == self._history.current:
            return
        self._history.push(query)

    def _on_navigation(self, query: str) -> None:
        self._settle.cancel()
        self._sync.cancel()
        restored = parse_filters(query)
        self._pending = restored
        self._committed = restored
        _logger.debug("Filters restored from history %r", query)
        self._notify()

    def _notify(self) -> None:
        committed = self._committed
        for listener in list(self._listeners):
            try:
                listener(committed)
            except Exception:
                _logger.warning("Filter listener failed", exc_info=True)
