"""Vehicle model."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import field_validator

from evfleet.models._base import FleetBaseModel
from evfleet.models.telemetry import TelemetrySnapshot


class VehicleStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class Vehicle(FleetBaseModel):
    """A fleet vehicle as held by the vehicle store."""

    id: str
    """Stable unique id (``EV-001``...)."""
    name: str
    model: str
    status: VehicleStatus
    telemetry: TelemetrySnapshot
    last_updated: datetime
    """UTC time of the last telemetry write."""

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        vehicle_id = value.strip()
        if not vehicle_id:
            raise ValueError("id must be non-empty")
        return vehicle_id

    @field_validator("last_updated")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
