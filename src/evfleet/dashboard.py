"""Dashboard facade.

Wires the vehicle store, simulation driver, alert engine, filter sync and
sort state together and produces the read-only :class:`DashboardSnapshot`
that render consumers display.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta

from evfleet._scheduling import LoopScheduler, Scheduler
from evfleet.alerts.engine import AlertEngine
from evfleet.config import FleetConfig
from evfleet.models._base import FleetBaseModel
from evfleet.models.alert import Alert
from evfleet.models.vehicle import Vehicle
from evfleet.models.views import FilterCounts, FilterState, FleetStats, SortOption, SortOrder, SortState
from evfleet.simulation.driver import SimulationDriver
from evfleet.simulation.telemetry import build_initial_fleet
from evfleet.state.events import ChangeKind, StoreChange
from evfleet.state.store import VehicleStore
from evfleet.sync.filters import FilterSync
from evfleet.sync.history import NavigationHistory
from evfleet.views.filters import filter_counts, filter_vehicles
from evfleet.views.sorting import sort_vehicles
from evfleet.views.stats import fleet_stats

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SimulationStatus(FleetBaseModel):
    running: bool
    interval_ms: int
    tick_count: int = 0
    error: str | None = None


class DashboardSnapshot(FleetBaseModel):
    """Everything a render pass needs, recomputed on demand."""

    vehicles: list[Vehicle]
    """Committed filters applied, then sorted."""
    counts: FilterCounts
    stats: FleetStats
    sort: SortState
    filters: FilterState
    """Pending filters (what the filter controls show)."""
    committed_filters: FilterState
    query: str
    alerts: list[Alert]
    unread_count: int
    critical_count: int
    alerts_by_vehicle: dict[str, list[Alert]]
    simulation: SimulationStatus


class FleetDashboard:
    """Owns one instance of every engine and keeps them connected."""

    def __init__(
        self,
        config: FleetConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        history: NavigationHistory | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
        vehicles: Iterable[Vehicle] | None = None,
    ) -> None:
        self._config = config or FleetConfig()
        scheduler = scheduler or LoopScheduler()
        rng = rng or random.Random(self._config.seed)
        fleet = list(vehicles) if vehicles is not None else build_initial_fleet(rng, clock())

        self.store = VehicleStore(fleet, clock=clock, rng=rng)
        self.alerts = AlertEngine(
            thresholds=self._config.thresholds,
            retention=timedelta(hours=self._config.alert_retention_hours),
            dedup=self._config.alert_dedup,
            clock=clock,
        )
        self.simulation = SimulationDriver(
            self.store,
            scheduler=scheduler,
            interval_ms=self._config.simulation_interval_ms,
            restart_delay=self._config.simulation_restart_delay,
        )
        self.filters = FilterSync(
            history,
            scheduler=scheduler,
            settle_delay=self._config.filter_settle_delay,
            sync_delay=self._config.filter_sync_delay,
        )
        self._sort = SortState()
        self._closed = False

        self._unsubscribe_store = self.store.subscribe(self._on_store_change)
        self.alerts.observe(self.store.vehicles)
        if self._config.autostart_simulation:
            self.simulation.start()

    @property
    def config(self) -> FleetConfig:
        return self._config

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    @property
    def sort_state(self) -> SortState:
        return self._sort

    def set_sort(self, option: SortOption | str | None = None, order: SortOrder | str | None = None) -> SortState:
        sort = self._sort
        if option is not None:
            sort = sort.with_option(option)
        if order is not None:
            sort = sort.with_order(order)
        self._sort = sort
        return sort

    def toggle_sort_order(self) -> SortState:
        self._sort = self._sort.toggled()
        return self._sort

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def visible_vehicles(self) -> list[Vehicle]:
        return sort_vehicles(filter_vehicles(self.store.vehicles, self.filters.committed), self._sort)

    def snapshot(self) -> DashboardSnapshot:
        vehicles = self.store.vehicles
        return DashboardSnapshot(
            vehicles=self.visible_vehicles(),
            counts=filter_counts(vehicles),
            stats=fleet_stats(vehicles),
            sort=self._sort,
            filters=self.filters.pending,
            committed_filters=self.filters.committed,
            query=self.filters.query,
            alerts=list(self.alerts.active_alerts),
            unread_count=self.alerts.unread_count,
            critical_count=self.alerts.critical_count,
            alerts_by_vehicle=self.alerts.alerts_by_vehicle,
            simulation=self.simulation_status(),
        )

    def simulation_status(self) -> SimulationStatus:
        return SimulationStatus(
            running=self.simulation.is_running,
            interval_ms=self.simulation.interval_ms,
            tick_count=self.simulation.tick_count,
            error=self.simulation.error,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Cancel every timer and debounce and detach all subscriptions."""
        if self._closed:
            return
        self._closed = True
        self.simulation.close()
        self.filters.close()
        self._unsubscribe_store()
        _logger.debug("Dashboard closed")

    def _on_store_change(self, change: StoreChange) -> None:
        if change.kind == ChangeKind.SIMULATION:
            return
        self.alerts.observe(self.store.vehicles)
