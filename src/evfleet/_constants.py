"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Fleet roster
# ------------------------------------------------------------------

FLEET_SIZE = 10
VEHICLE_MODELS: tuple[str, ...] = (
    "Tesla Model S",
    "BMW iX",
    "Audi e-tron",
    "Mercedes EQS",
    "Rivian R1T",
    "Ford F-150 Lightning",
    "Volvo XC40",
    "Nissan Leaf",
    "Hyundai Ioniq 5",
    "Lucid Air",
)

# Initial status draw: maintenance first, then active vs inactive.
MAINTENANCE_DRAW_THRESHOLD = 0.8
ACTIVE_DRAW_THRESHOLD = 0.1

# ------------------------------------------------------------------
# Telemetry ranges  (half-open: min <= value < max)
# ------------------------------------------------------------------

TELEMETRY_RANGES: dict[str, tuple[float, float]] = {
    "speed": (0, 120),
    "battery_level": (0, 100),
    "temperature": (10, 70),
    "tire_pressure": (25, 45),
    "motor_efficiency": (70, 100),
    "odometer": (10_000, 60_000),
    "energy_consumption": (15, 30),
    "voltage": (350, 450),
    "current": (50, 250),
}

# Fixed reference point (New York City) and jitter in degrees per axis.
REFERENCE_LAT = 40.7128
REFERENCE_LNG = -74.0060
LOCATION_JITTER_DEG = 0.05

REGEN_BRAKING_THRESHOLD = 0.7

# ------------------------------------------------------------------
# Simulation timing (milliseconds)
# ------------------------------------------------------------------

MIN_SIMULATION_INTERVAL_MS = 1000
MAX_SIMULATION_INTERVAL_MS = 5000
DEFAULT_SIMULATION_INTERVAL_MS = 3000
SIMULATION_RESTART_DELAY_S = 0.1


def clamp_interval_ms(interval_ms: float) -> int:
    """Clamp a simulation interval to the supported ``[1000, 5000]`` ms window."""
    return int(max(MIN_SIMULATION_INTERVAL_MS, min(MAX_SIMULATION_INTERVAL_MS, interval_ms)))


# ------------------------------------------------------------------
# Filter sync debounce (seconds)
# ------------------------------------------------------------------

FILTER_SETTLE_DELAY_S = 0.15
FILTER_SYNC_DELAY_S = 0.3
FILTER_ALL = "all"

# ------------------------------------------------------------------
# Alerts
# ------------------------------------------------------------------

ALERT_RETENTION_HOURS = 24
CHARGING_ISSUE_BATTERY_MAX = 30
