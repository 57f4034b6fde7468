"""Filter engine.

All functions are pure: they take snapshots and return new values.
"""

from __future__ import annotations

from collections.abc import Iterable

from evfleet._constants import FILTER_ALL
from evfleet.models.telemetry import ChargingStatus
from evfleet.models.vehicle import Vehicle, VehicleStatus
from evfleet.models.views import FilterCounts, FilterState


def matches(vehicle: Vehicle, filters: FilterState) -> bool:
    """Return ``True`` when *vehicle* passes *filters* (empty = match all)."""
    status_ok = not filters.status or vehicle.status in filters.status
    charging_ok = not filters.charging or vehicle.telemetry.charging_status in filters.charging
    return status_ok and charging_ok


def filter_vehicles(vehicles: Iterable[Vehicle], filters: FilterState) -> list[Vehicle]:
    """Return the vehicles matching *filters*, preserving input order."""
    return [vehicle for vehicle in vehicles if matches(vehicle, filters)]


def filter_counts(vehicles: Iterable[Vehicle]) -> FilterCounts:
    """Count vehicles per status and charging value over the full collection."""
    counts = dict.fromkeys(FilterCounts.model_fields, 0)
    for vehicle in vehicles:
        counts["total"] += 1
        counts[str(vehicle.status)] += 1
        counts[str(vehicle.telemetry.charging_status)] += 1
    return FilterCounts(**counts)


def _toggle(current: tuple[str, ...], value: str) -> tuple[str, ...]:
    token = str(value)
    if token == FILTER_ALL:
        return ()
    if token in current:
        return tuple(item for item in current if item != token)
    return (*current, token)


def toggle_status(filters: FilterState, value: VehicleStatus | str) -> FilterState:
    """Add or remove a status value; ``"all"`` clears the status filter."""
    return filters.model_copy(update={"status": _toggle(filters.status, value)})


def toggle_charging(filters: FilterState, value: ChargingStatus | str) -> FilterState:
    """Add or remove a charging value; ``"all"`` clears the charging filter."""
    return filters.model_copy(update={"charging": _toggle(filters.charging, value)})


def clear_filters() -> FilterState:
    return FilterState()
