from __future__ import annotations

import pytest

from evfleet.alerts.engine import AlertDedup
from evfleet.config import FleetConfig
from evfleet.exceptions import FleetConfigError
from evfleet.models.alert import AlertThresholds


def test_defaults(clean_env) -> None:
    config = FleetConfig.from_env()
    assert config.simulation_interval_ms == 3000
    assert config.autostart_simulation is False
    assert config.alert_retention_hours == 24
    assert config.alert_dedup == AlertDedup.RULE
    assert config.thresholds == AlertThresholds()
    assert (config.host, config.port) == ("127.0.0.1", 8080)
    assert config.seed is None


@pytest.mark.parametrize(("requested", "effective"), [(10, 1000), (4200, 4200), (60_000, 5000)])
def test_interval_is_clamped_not_rejected(requested: int, effective: int) -> None:
    assert FleetConfig(simulation_interval_ms=requested).simulation_interval_ms == effective


def test_invalid_values_raise() -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig(alert_dedup="whenever")
    with pytest.raises(FleetConfigError):
        FleetConfig(alert_retention_hours=0)


def test_from_env_reads_variables(clean_env) -> None:
    clean_env.setenv("EVFLEET_SIMULATION_INTERVAL_MS", "1500")
    clean_env.setenv("EVFLEET_AUTOSTART", "yes")
    clean_env.setenv("EVFLEET_SEED", "42")
    clean_env.setenv("EVFLEET_ALERT_DEDUP", "exact_id")
    clean_env.setenv("EVFLEET_ALERT_RETENTION_HOURS", "12.5")
    clean_env.setenv("EVFLEET_LOW_BATTERY", "25")
    clean_env.setenv("EVFLEET_SPEED_LIMIT", "100")
    clean_env.setenv("EVFLEET_HOST", " 0.0.0.0 ")
    clean_env.setenv("EVFLEET_PORT", "9000")
    clean_env.setenv("EVFLEET_LOG_LEVEL", "DEBUG")

    config = FleetConfig.from_env()

    assert config.simulation_interval_ms == 1500
    assert config.autostart_simulation is True
    assert config.seed == 42
    assert config.alert_dedup == AlertDedup.EXACT_ID
    assert config.alert_retention_hours == 12.5
    assert config.thresholds.low_battery == 25
    assert config.thresholds.speed_limit == 100
    assert config.thresholds.high_temperature == 45
    assert config.host == "0.0.0.0"
    assert config.port == 9000
    assert config.log_level == "DEBUG"


def test_overrides_take_precedence(clean_env) -> None:
    clean_env.setenv("EVFLEET_SIMULATION_INTERVAL_MS", "1500")
    clean_env.setenv("EVFLEET_AUTOSTART", "1")
    clean_env.setenv("EVFLEET_HIGH_TEMPERATURE", "40")

    config = FleetConfig.from_env(
        simulation_interval_ms=4000,
        autostart_simulation=False,
        thresholds={"low_battery": 30},
    )

    assert config.simulation_interval_ms == 4000
    assert config.autostart_simulation is False
    assert config.thresholds.low_battery == 30
    assert config.thresholds.high_temperature == 40


def test_threshold_model_override_replaces_env(clean_env) -> None:
    clean_env.setenv("EVFLEET_HIGH_TEMPERATURE", "40")
    config = FleetConfig.from_env(thresholds=AlertThresholds(speed_limit=90))
    assert config.thresholds == AlertThresholds(speed_limit=90)


def test_threshold_override_skips_malformed_env(clean_env) -> None:
    clean_env.setenv("EVFLEET_LOW_BATTERY", "low")

    config = FleetConfig.from_env(thresholds=AlertThresholds(low_battery=15))
    assert config.thresholds.low_battery == 15

    config = FleetConfig.from_env(thresholds={"low_battery": 18})
    assert config.thresholds.low_battery == 18


def test_bad_threshold_override_raises_config_error(clean_env) -> None:
    with pytest.raises(FleetConfigError):
        FleetConfig.from_env(thresholds={"speed_limit": "fast"})


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("EVFLEET_SIMULATION_INTERVAL_MS", "fast"),
        ("EVFLEET_PORT", "eighty"),
        ("EVFLEET_LOW_BATTERY", "low"),
        ("EVFLEET_ALERT_DEDUP", "sometimes"),
    ],
)
def test_bad_environment_raises_config_error(clean_env, key: str, value: str) -> None:
    clean_env.setenv(key, value)
    with pytest.raises(FleetConfigError):
        FleetConfig.from_env()


def test_unrecognised_bool_falls_back_to_default(clean_env) -> None:
    clean_env.setenv("EVFLEET_AUTOSTART", "maybe")
    assert FleetConfig.from_env().autostart_simulation is False
