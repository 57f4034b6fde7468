"""Fleet overview statistics."""

from __future__ import annotations

from collections.abc import Iterable

from evfleet.models.telemetry import ChargingStatus
from evfleet.models.vehicle import Vehicle, VehicleStatus
from evfleet.models.views import FleetStats


def fleet_stats(vehicles: Iterable[Vehicle]) -> FleetStats:
    fleet = list(vehicles)
    if not fleet:
        return FleetStats()

    active = [vehicle for vehicle in fleet if vehicle.status == VehicleStatus.ACTIVE]
    battery_total = sum(vehicle.telemetry.battery_level for vehicle in fleet)
    active_speed_total = sum(vehicle.telemetry.speed for vehicle in active)

    return FleetStats(
        total=len(fleet),
        active=len(active),
        inactive=sum(1 for vehicle in fleet if vehicle.status == VehicleStatus.INACTIVE),
        maintenance=sum(1 for vehicle in fleet if vehicle.status == VehicleStatus.MAINTENANCE),
        charging=sum(1 for vehicle in fleet if vehicle.telemetry.charging_status == ChargingStatus.CHARGING),
        average_battery=round(battery_total / len(fleet)),
        # Divide by at least one so a fleet with nothing moving reports 0.
        average_speed=round(active_speed_total / max(len(active), 1)),
        total_odometer=sum(vehicle.telemetry.odometer for vehicle in fleet),
    )
