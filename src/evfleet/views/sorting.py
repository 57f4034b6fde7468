"""Sort engine."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from evfleet.models.vehicle import Vehicle
from evfleet.models.views import SortOption, SortOrder, SortState

_SORT_KEYS: dict[SortOption, Callable[[Vehicle], Any]] = {
    SortOption.NAME: lambda vehicle: vehicle.name.lower(),
    SortOption.BATTERY: lambda vehicle: vehicle.telemetry.battery_level,
    SortOption.SPEED: lambda vehicle: vehicle.telemetry.speed,
    SortOption.ODOMETER: lambda vehicle: vehicle.telemetry.odometer,
    SortOption.STATUS: lambda vehicle: str(vehicle.status),
}


def sort_vehicles(vehicles: Iterable[Vehicle], sort_state: SortState) -> list[Vehicle]:
    """Return a new list ordered by ``sort_state``.

    The sort is stable in both directions: vehicles with equal keys keep
    their input order, so ``desc`` is only the exact reverse of ``asc``
    when there are no ties.
    """
    key = _SORT_KEYS[sort_state.option]
    return sorted(vehicles, key=key, reverse=sort_state.order == SortOrder.DESC)
