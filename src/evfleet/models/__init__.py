"""Data models for fleet vehicles, telemetry, alerts and view state."""

from evfleet.models._base import FleetBaseModel
from evfleet.models.alert import DEFAULT_THRESHOLDS, Alert, AlertSeverity, AlertThresholds, AlertType
from evfleet.models.telemetry import ChargingStatus, Location, TelemetrySnapshot
from evfleet.models.vehicle import Vehicle, VehicleStatus
from evfleet.models.views import FilterCounts, FilterState, FleetStats, SortOption, SortOrder, SortState

__all__ = [
    "DEFAULT_THRESHOLDS",
    "Alert",
    "AlertSeverity",
    "AlertThresholds",
    "AlertType",
    "ChargingStatus",
    "FilterCounts",
    "FilterState",
    "FleetBaseModel",
    "FleetStats",
    "Location",
    "SortOption",
    "SortOrder",
    "SortState",
    "TelemetrySnapshot",
    "Vehicle",
    "VehicleStatus",
]
