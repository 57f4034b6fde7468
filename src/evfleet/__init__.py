"""evfleet - EV fleet telemetry simulation and derived dashboard state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("evfleet")
except PackageNotFoundError:
    __version__ = "0+local"
from evfleet.alerts import AlertDedup, AlertEngine
from evfleet.config import FleetConfig
from evfleet.dashboard import DashboardSnapshot, FleetDashboard, SimulationStatus
from evfleet.exceptions import FleetConfigError, FleetError, FleetValidationError, SimulationError
from evfleet.models import (
    Alert,
    AlertSeverity,
    AlertThresholds,
    AlertType,
    ChargingStatus,
    FilterCounts,
    FilterState,
    FleetStats,
    Location,
    SortOption,
    SortOrder,
    SortState,
    TelemetrySnapshot,
    Vehicle,
    VehicleStatus,
)
from evfleet.simulation.driver import SimulationDriver
from evfleet.state.store import VehicleStore
from evfleet.sync import FilterSync, NavigationHistory

__all__ = [
    "Alert",
    "AlertDedup",
    "AlertEngine",
    "AlertSeverity",
    "AlertThresholds",
    "AlertType",
    "ChargingStatus",
    "DashboardSnapshot",
    "FilterCounts",
    "FilterState",
    "FilterSync",
    "FleetConfig",
    "FleetConfigError",
    "FleetDashboard",
    "FleetError",
    "FleetStats",
    "FleetValidationError",
    "Location",
    "NavigationHistory",
    "SimulationDriver",
    "SimulationError",
    "SimulationStatus",
    "SortOption",
    "SortOrder",
    "SortState",
    "TelemetrySnapshot",
    "Vehicle",
    "VehicleStatus",
    "VehicleStore",
    "__version__",
]
