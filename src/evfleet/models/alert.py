"""Alert and threshold models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from evfleet.models._base import FleetBaseModel


class AlertType(StrEnum):
    LOW_BATTERY = "low_battery"
    HIGH_TEMPERATURE = "high_temperature"
    MAINTENANCE_DUE = "maintenance_due"
    CHARGING_ERROR = "charging_error"
    SPEED_LIMIT = "speed_limit"


class AlertSeverity(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertThresholds(FleetBaseModel):
    """Rule thresholds used by the alert engine."""

    low_battery: float = 20
    """Battery percentage at or below which a low-battery alert fires."""
    high_temperature: float = 45
    """Temperature (°C) at or above which a high-temperature alert fires."""
    maintenance_due: float = 50_000
    """Odometer (km) at or above which maintenance is due."""
    speed_limit: float = 120
    """Speed (km/h) above which an active vehicle is overspeeding."""


DEFAULT_THRESHOLDS = AlertThresholds()


class Alert(FleetBaseModel):
    """A single alert record.

    ``id`` is ``"{vehicle_id}_{timestamp}_{suffix}"`` where the suffix
    names the rule that produced it. Only ``is_read`` and
    ``is_dismissed`` ever change after creation.
    """

    id: str
    vehicle_id: str
    vehicle_name: str
    type: AlertType
    severity: AlertSeverity
    title: str
    message: str
    timestamp: int = Field(..., description="Creation time (epoch milliseconds)")
    is_read: bool = False
    is_dismissed: bool = False
