"""In-memory vehicle store.

This is the only component allowed to mutate vehicles. Everyone else
reads the tuple of frozen :class:`Vehicle` snapshots it hands out.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from evfleet.exceptions import FleetValidationError
from evfleet.models._base import field_name_map
from evfleet.models.telemetry import TelemetrySnapshot
from evfleet.models.vehicle import Vehicle, VehicleStatus
from evfleet.simulation.telemetry import generate_telemetry
from evfleet.state.events import ChangeKind, StoreChange

_logger = logging.getLogger(__name__)

StoreListener = Callable[[StoreChange], None]

_TELEMETRY_FIELDS = field_name_map(TelemetrySnapshot)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _normalize_patch(patch: Mapping[str, Any]) -> dict[str, Any]:
    """Map camelCase aliases to field names and drop unknown keys."""
    normalized: dict[str, Any] = {}
    for key, value in patch.items():
        field_name = _TELEMETRY_FIELDS.get(key)
        if field_name is None:
            _logger.debug("Ignoring unknown telemetry key %r", key)
            continue
        normalized[field_name] = value
    return normalized


class VehicleStore:
    """Owns the fleet and the simulation-enabled flag.

    Vehicles keep their insertion order for the lifetime of the store.
    Updates that reference an unknown vehicle id are tolerated as no-ops.
    """

    def __init__(
        self,
        vehicles: Iterable[Vehicle] = (),
        *,
        clock: Callable[[], datetime] = _utcnow,
        rng: random.Random | None = None,
    ) -> None:
        self._clock = clock
        self._rng = rng or random.Random()
        self._vehicles: dict[str, Vehicle] = {}
        self._simulation_enabled = False
        self._listeners: list[StoreListener] = []
        for vehicle in vehicles:
            self._vehicles[vehicle.id] = vehicle

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return tuple(self._vehicles.values())

    @property
    def simulation_enabled(self) -> bool:
        return self._simulation_enabled

    def get(self, vehicle_id: str) -> Vehicle | None:
        return self._vehicles.get(vehicle_id)

    def __len__(self) -> int:
        return len(self._vehicles)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, kind: ChangeKind, vehicle_ids: Iterable[str] = ()) -> None:
        change = StoreChange(kind=kind, vehicle_ids=tuple(vehicle_ids), observed_at=self._clock())
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                _logger.warning("Store listener failed for %s change", kind, exc_info=True)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update_telemetry(self, vehicle_id: str, patch: Mapping[str, Any]) -> None:
        """Merge *patch* into the vehicle's telemetry and stamp ``last_updated``.

        Keys may be field names (``battery_level``) or aliases
        (``batteryLevel``). Unknown vehicle ids are ignored.

        Raises
        ------
        FleetValidationError
            If the merged telemetry does not validate.
        """
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            _logger.debug("Telemetry update for unknown vehicle %s ignored", vehicle_id)
            return

        merged = vehicle.telemetry.model_dump()
        normalized = _normalize_patch(patch)
        location = normalized.get("location")
        if isinstance(location, Mapping):
            normalized["location"] = {**merged["location"], **location}
        merged.update(normalized)
        try:
            telemetry = TelemetrySnapshot.model_validate(merged)
        except ValidationError as exc:
            raise FleetValidationError(
                f"Invalid telemetry for {vehicle_id}: {exc.error_count()} error(s)",
                vehicle_id=vehicle_id,
            ) from exc

        self._vehicles[vehicle_id] = vehicle.model_copy(
            update={"telemetry": telemetry, "last_updated": self._clock()}
        )
        self._notify(ChangeKind.TELEMETRY, (vehicle_id,))

    def update_all_active_telemetry(self) -> list[str]:
        """Replace the telemetry of every active vehicle with a fresh sample.

        Returns the ids that were updated. Vehicles that are inactive or
        in maintenance are left untouched.
        """
        updated: list[str] = []
        for vehicle_id, vehicle in list(self._vehicles.items()):
            if vehicle.status != VehicleStatus.ACTIVE:
                continue
            try:
                self._vehicles[vehicle_id] = vehicle.model_copy(
                    update={"telemetry": generate_telemetry(self._rng), "last_updated": self._clock()}
                )
            except Exception:
                _logger.warning("Telemetry refresh failed for %s", vehicle_id, exc_info=True)
                continue
            updated.append(vehicle_id)

        _logger.debug("Refreshed telemetry for %d active vehicle(s)", len(updated))
        self._notify(ChangeKind.TELEMETRY, updated)
        return updated

    def set_status(self, vehicle_id: str, status: VehicleStatus | str) -> None:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None:
            _logger.debug("Status update for unknown vehicle %s ignored", vehicle_id)
            return
        new_status = VehicleStatus(status)
        if vehicle.status == new_status:
            return
        self._vehicles[vehicle_id] = vehicle.model_copy(update={"status": new_status})
        self._notify(ChangeKind.STATUS, (vehicle_id,))

    def set_simulation_enabled(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled == self._simulation_enabled:
            return
        self._simulation_enabled = enabled
        self._notify(ChangeKind.SIMULATION)

