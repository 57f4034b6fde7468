"""Synthetic telemetry and initial fleet generation."""

from __future__ import annotations

import math
import random
from datetime import datetime

from evfleet._constants import (
    ACTIVE_DRAW_THRESHOLD,
    FLEET_SIZE,
    LOCATION_JITTER_DEG,
    MAINTENANCE_DRAW_THRESHOLD,
    REFERENCE_LAT,
    REFERENCE_LNG,
    REGEN_BRAKING_THRESHOLD,
    TELEMETRY_RANGES,
    VEHICLE_MODELS,
)
from evfleet.models.telemetry import ChargingStatus, Location, TelemetrySnapshot
from evfleet.models.vehicle import Vehicle, VehicleStatus

_CHARGING_CHOICES: tuple[ChargingStatus, ...] = tuple(ChargingStatus)


def _draw(rng: random.Random, field_name: str) -> int:
    low, high = TELEMETRY_RANGES[field_name]
    return int(math.floor(rng.random() * (high - low)) + low)


def _jitter(rng: random.Random, center: float) -> float:
    return center + (rng.random() - 0.5) * 2 * LOCATION_JITTER_DEG


def generate_telemetry(rng: random.Random | None = None) -> TelemetrySnapshot:
    """Draw one telemetry sample.

    Every numeric field is drawn independently and uniformly within its
    half-open range from :data:`TELEMETRY_RANGES`. Pass a seeded
    ``random.Random`` for reproducible samples.
    """
    rng = rng or random.Random()
    return TelemetrySnapshot(
        speed=_draw(rng, "speed"),
        battery_level=_draw(rng, "battery_level"),
        temperature=_draw(rng, "temperature"),
        tire_pressure=_draw(rng, "tire_pressure"),
        motor_efficiency=_draw(rng, "motor_efficiency"),
        regenerative_braking=rng.random() > REGEN_BRAKING_THRESHOLD,
        location=Location(lat=_jitter(rng, REFERENCE_LAT), lng=_jitter(rng, REFERENCE_LNG)),
        odometer=_draw(rng, "odometer"),
        energy_consumption=_draw(rng, "energy_consumption"),
        charging_status=rng.choice(_CHARGING_CHOICES),
        voltage=_draw(rng, "voltage"),
        current=_draw(rng, "current"),
    )


def telemetry_within_ranges(snapshot: TelemetrySnapshot) -> bool:
    """Return ``True`` when every ranged field of *snapshot* is within bounds."""
    for field_name, (low, high) in TELEMETRY_RANGES.items():
        value = getattr(snapshot, field_name)
        if not low <= value < high:
            return False
    lat_ok = abs(snapshot.location.lat - REFERENCE_LAT) <= LOCATION_JITTER_DEG
    lng_ok = abs(snapshot.location.lng - REFERENCE_LNG) <= LOCATION_JITTER_DEG
    return lat_ok and lng_ok


def _draw_status(rng: random.Random) -> VehicleStatus:
    if rng.random() > MAINTENANCE_DRAW_THRESHOLD:
        return VehicleStatus.MAINTENANCE
    if rng.random() > ACTIVE_DRAW_THRESHOLD:
        return VehicleStatus.ACTIVE
    return VehicleStatus.INACTIVE


def build_initial_fleet(rng: random.Random, now: datetime) -> list[Vehicle]:
    """Create the fixed ten-vehicle fleet (``EV-001``..``EV-010``)."""
    vehicles: list[Vehicle] = []
    for index in range(1, FLEET_SIZE + 1):
        vehicles.append(
            Vehicle(
                id=f"EV-{index:03d}",
                name=f"Fleet Vehicle {index}",
                model=VEHICLE_MODELS[index - 1],
                status=_draw_status(rng),
                telemetry=generate_telemetry(rng),
                last_updated=now,
            )
        )
    return vehicles
