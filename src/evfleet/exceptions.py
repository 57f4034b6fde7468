"""Custom exception hierarchy for evfleet."""

from __future__ import annotations


class FleetError(Exception):
    """Base exception for all evfleet errors."""


class FleetConfigError(FleetError):
    """Invalid configuration value."""


class FleetValidationError(FleetError):
    """A telemetry or status update could not be validated."""

    def __init__(self, message: str, *, vehicle_id: str = "") -> None:
        self.vehicle_id = vehicle_id
        super().__init__(message)


class SimulationError(FleetError):
    """The simulation timer could not be started or stopped.

    The driver never lets this escape a tick; it is recorded in the
    driver's error slot so callers can display and clear it.
    """
