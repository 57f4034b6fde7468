from __future__ import annotations

import pytest

from evfleet.config import FleetConfig
from evfleet.dashboard import FleetDashboard
from evfleet.models.alert import AlertType
from evfleet.models.views import FilterCounts, SortOption, SortOrder
from evfleet.sync.history import NavigationHistory


@pytest.fixture
def fleet(make_vehicle):
    return [
        make_vehicle("EV-001", name="Delta", status="active", battery_level=60, charging_status="charging"),
        make_vehicle("EV-002", name="alpha", status="active", battery_level=90),
        make_vehicle("EV-003", name="Charlie", status="inactive", battery_level=25, charging_status="idle"),
        make_vehicle("EV-004", name="Bravo", status="maintenance", battery_level=70),
    ]


@pytest.fixture
def dashboard(scheduler, fleet):
    board = FleetDashboard(FleetConfig(), scheduler=scheduler, clock=scheduler.clock, vehicles=fleet)
    yield board
    board.close()


def test_seeded_dashboards_build_identical_fleets(scheduler) -> None:
    first = FleetDashboard(FleetConfig(seed=9), scheduler=scheduler, clock=scheduler.clock)
    second = FleetDashboard(FleetConfig(seed=9), scheduler=scheduler, clock=scheduler.clock)

    assert len(first.store) == 10
    assert first.store.vehicles == second.store.vehicles


def test_alerts_are_evaluated_at_construction(dashboard) -> None:
    # EV-003 is inactive, idle and at 25 %: a charging issue.
    assert [alert.type for alert in dashboard.alerts.active_alerts] == [AlertType.CHARGING_ERROR]


def test_store_changes_reevaluate_alerts(dashboard) -> None:
    dashboard.store.update_telemetry("EV-002", {"batteryLevel": 8})

    snapshot = dashboard.snapshot()
    assert snapshot.critical_count == 1
    assert [alert.vehicle_id for alert in snapshot.alerts_by_vehicle["EV-002"]] == ["EV-002"]


def test_snapshot_filters_then_sorts(dashboard, scheduler) -> None:
    dashboard.set_sort(option="battery", order="desc")
    dashboard.filters.toggle_status("active")
    dashboard.filters.toggle_status("maintenance")

    # Pending only: the list is not filtered yet.
    snapshot = dashboard.snapshot()
    assert snapshot.filters.status == ("active", "maintenance")
    assert snapshot.committed_filters.is_empty
    assert [vehicle.id for vehicle in snapshot.vehicles] == ["EV-002", "EV-004", "EV-001", "EV-003"]

    scheduler.advance(0.2)
    snapshot = dashboard.snapshot()
    assert [vehicle.id for vehicle in snapshot.vehicles] == ["EV-002", "EV-004", "EV-001"]

    dashboard.toggle_sort_order()
    assert [vehicle.id for vehicle in dashboard.visible_vehicles()] == ["EV-001", "EV-004", "EV-002"]


def test_counts_and_stats_ignore_filters(dashboard) -> None:
    expected = FilterCounts(total=4, active=2, inactive=1, maintenance=1, charging=1, discharging=2, idle=1)
    assert dashboard.snapshot().counts == expected

    dashboard.filters.toggle_charging("idle")
    dashboard.filters.flush()

    snapshot = dashboard.snapshot()
    assert [vehicle.id for vehicle in snapshot.vehicles] == ["EV-003"]
    assert snapshot.counts == expected
    assert snapshot.stats.total == 4
    assert snapshot.stats.average_battery == 61


def test_default_sort_is_name_ascending(dashboard) -> None:
    assert dashboard.sort_state.option == SortOption.NAME
    assert dashboard.sort_state.order == SortOrder.ASC
    assert [vehicle.name for vehicle in dashboard.visible_vehicles()] == ["alpha", "Bravo", "Charlie", "Delta"]


def test_invalid_sort_option_raises(dashboard) -> None:
    with pytest.raises(ValueError):
        dashboard.set_sort(option="colour")
    assert dashboard.sort_state.option == SortOption.NAME


def test_simulation_through_dashboard(dashboard, scheduler) -> None:
    dashboard.simulation.set_interval(1000)
    dashboard.simulation.start()
    scheduler.advance(2.0)

    status = dashboard.simulation_status()
    assert status.running
    assert status.tick_count == 2
    assert status.interval_ms == 1000
    assert dashboard.store.get("EV-001").last_updated > dashboard.store.get("EV-003").last_updated


def test_autostart(scheduler, fleet) -> None:
    board = FleetDashboard(
        FleetConfig(autostart_simulation=True), scheduler=scheduler, clock=scheduler.clock, vehicles=fleet
    )
    assert board.simulation.is_running
    assert board.store.simulation_enabled
    board.close()


def test_history_drives_initial_filters(scheduler, fleet) -> None:
    board = FleetDashboard(
        scheduler=scheduler,
        clock=scheduler.clock,
        vehicles=fleet,
        history=NavigationHistory("status=inactive"),
    )
    assert [vehicle.id for vehicle in board.visible_vehicles()] == ["EV-003"]
    assert board.snapshot().query == "status=inactive"
    board.close()


def test_close_tears_everything_down(dashboard, scheduler) -> None:
    dashboard.simulation.start()
    dashboard.filters.toggle_status("active")
    assert scheduler.live_handles

    dashboard.close()
    dashboard.close()
    scheduler.advance(10.0)

    assert scheduler.live_handles == []
    assert dashboard.simulation.tick_count == 0
    assert dashboard.filters.committed.is_empty


def test_snapshot_serializes_with_camel_case_keys(dashboard) -> None:
    payload = dashboard.snapshot().to_json_dict()
    assert {
        "vehicles",
        "counts",
        "stats",
        "sort",
        "filters",
        "committedFilters",
        "query",
        "alerts",
        "unreadCount",
        "criticalCount",
        "alertsByVehicle",
        "simulation",
    } <= set(payload)
    assert payload["simulation"] == {"running": False, "intervalMs": 3000, "tickCount": 0, "error": None}
    assert payload["stats"]["averageBattery"] == 61
