"""Threshold alert rules.

Each rule looks at one vehicle and either returns a :class:`RuleHit`
(severity plus wording) or ``None``. Rules never build ids or timestamps;
the engine owns those.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from evfleet._constants import CHARGING_ISSUE_BATTERY_MAX
from evfleet.models.alert import AlertSeverity, AlertThresholds, AlertType
from evfleet.models.telemetry import ChargingStatus
from evfleet.models.vehicle import Vehicle, VehicleStatus


@dataclass(frozen=True)
class RuleHit:
    severity: AlertSeverity
    title: str
    message: str


@dataclass(frozen=True)
class AlertRule:
    """A named rule. ``suffix`` is appended to alert ids."""

    type: AlertType
    suffix: str
    check: Callable[[Vehicle, AlertThresholds], RuleHit | None]


def _fmt(value: float) -> str:
    return f"{value:g}"


def check_low_battery(vehicle: Vehicle, thresholds: AlertThresholds) -> RuleHit | None:
    level = vehicle.telemetry.battery_level
    if level > thresholds.low_battery:
        return None
    if level <= 10:
        severity = AlertSeverity.CRITICAL
    elif level <= 15:
        severity = AlertSeverity.HIGH
    else:
        severity = AlertSeverity.MEDIUM
    return RuleHit(
        severity=severity,
        title="Low Battery Warning",
        message=f"Battery level at {_fmt(level)}%. Charging recommended.",
    )


def check_high_temperature(vehicle: Vehicle, thresholds: AlertThresholds) -> RuleHit | None:
    temperature = vehicle.telemetry.temperature
    if temperature < thresholds.high_temperature:
        return None
    if temperature >= 55:
        severity = AlertSeverity.CRITICAL
    elif temperature >= 50:
        severity = AlertSeverity.HIGH
    else:
        severity = AlertSeverity.MEDIUM
    return RuleHit(
        severity=severity,
        title="High Temperature Alert",
        message=f"Temperature at {_fmt(temperature)}°C. System may overheat.",
    )


def check_maintenance_due(vehicle: Vehicle, thresholds: AlertThresholds) -> RuleHit | None:
    odometer = vehicle.telemetry.odometer
    if odometer < thresholds.maintenance_due:
        return None
    return RuleHit(
        severity=AlertSeverity.MEDIUM,
        title="Maintenance Required",
        message=f"Vehicle has traveled {round(odometer)}km. Schedule maintenance.",
    )


def check_charging_issue(vehicle: Vehicle, thresholds: AlertThresholds) -> RuleHit | None:
    telemetry = vehicle.telemetry
    if (
        telemetry.charging_status != ChargingStatus.IDLE
        or telemetry.battery_level > CHARGING_ISSUE_BATTERY_MAX
        or vehicle.status != VehicleStatus.INACTIVE
    ):
        return None
    return RuleHit(
        severity=AlertSeverity.HIGH,
        title="Charging Issue",
        message=f"Vehicle idle with {_fmt(telemetry.battery_level)}% battery. Check charging connection.",
    )


def check_speed_limit(vehicle: Vehicle, thresholds: AlertThresholds) -> RuleHit | None:
    speed = vehicle.telemetry.speed
    if vehicle.status != VehicleStatus.ACTIVE or speed <= thresholds.speed_limit:
        return None
    return RuleHit(
        severity=AlertSeverity.HIGH,
        title="Speed Limit Exceeded",
        message=(
            f"Vehicle traveling at {_fmt(speed)} km/h. "
            f"Speed limit: {_fmt(thresholds.speed_limit)} km/h."
        ),
    )


DEFAULT_RULES: tuple[AlertRule, ...] = (
    AlertRule(AlertType.LOW_BATTERY, "battery", check_low_battery),
    AlertRule(AlertType.HIGH_TEMPERATURE, "temp", check_high_temperature),
    AlertRule(AlertType.MAINTENANCE_DUE, "maintenance", check_maintenance_due),
    AlertRule(AlertType.CHARGING_ERROR, "charging", check_charging_issue),
    AlertRule(AlertType.SPEED_LIMIT, "speed", check_speed_limit),
)
