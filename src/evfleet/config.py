"""Engine configuration for evfleet."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pydantic import ValidationError

from evfleet._constants import (
    ALERT_RETENTION_HOURS,
    DEFAULT_SIMULATION_INTERVAL_MS,
    FILTER_SETTLE_DELAY_S,
    FILTER_SYNC_DELAY_S,
    SIMULATION_RESTART_DELAY_S,
    clamp_interval_ms,
)
from evfleet.alerts.engine import AlertDedup
from evfleet.exceptions import FleetConfigError
from evfleet.models.alert import AlertThresholds


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise FleetConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Engine configuration.

    Parameters
    ----------
    simulation_interval_ms : int
        Tick period of the telemetry simulation. Clamped to
        ``[1000, 5000]``; out-of-range values are never rejected.
    autostart_simulation : bool
        Start ticking as soon as the dashboard is created.
    simulation_restart_delay : float
        Seconds to wait before re-arming the timer after an interval change.
    filter_settle_delay : float
        Quiet period (seconds) before pending filters are committed.
    filter_sync_delay : float
        Quiet period (seconds) before committed filters are pushed to history.
    alert_retention_hours : float
        Alerts older than this are dropped on the next evaluation.
    alert_dedup : AlertDedup
        ``"rule"`` keeps one live alert per vehicle and rule;
        ``"exact_id"`` only suppresses identical ids.
    thresholds : AlertThresholds
        Alert rule thresholds.
    seed : int or None
        Seed for the simulation's random source. ``None`` is non-deterministic.
    host : str
        Bind address of the HTTP surface.
    port : int
        Port of the HTTP surface.
    log_level : str
        Root logging level used by the CLI.
    """

    simulation_interval_ms: int = DEFAULT_SIMULATION_INTERVAL_MS
    autostart_simulation: bool = False
    simulation_restart_delay: float = SIMULATION_RESTART_DELAY_S
    filter_settle_delay: float = FILTER_SETTLE_DELAY_S
    filter_sync_delay: float = FILTER_SYNC_DELAY_S
    alert_retention_hours: float = ALERT_RETENTION_HOURS
    alert_dedup: AlertDedup = AlertDedup.RULE
    thresholds: AlertThresholds = dataclasses.field(default_factory=AlertThresholds)
    seed: int | None = None
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        object.__setattr__(self, "simulation_interval_ms", clamp_interval_ms(self.simulation_interval_ms))
        try:
            object.__setattr__(self, "alert_dedup", AlertDedup(self.alert_dedup))
        except ValueError as exc:
            choices = ", ".join(policy.value for policy in AlertDedup)
            raise FleetConfigError(f"alert_dedup must be one of {choices}, got {self.alert_dedup!r}") from exc
        if self.alert_retention_hours <= 0:
            raise FleetConfigError("alert_retention_hours must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from ``EVFLEET_*`` environment variables.

        Explicit keyword arguments take precedence over environment values.

        Raises
        ------
        FleetConfigError
            If a numeric variable does not parse, a threshold is invalid or
            the dedup policy is unknown.
        """
        env = os.environ

        _ENV_THRESHOLD_MAP = {
            "EVFLEET_LOW_BATTERY": "low_battery",
            "EVFLEET_HIGH_TEMPERATURE": "high_temperature",
            "EVFLEET_MAINTENANCE_DUE": "maintenance_due",
            "EVFLEET_SPEED_LIMIT": "speed_limit",
        }
        # A model override replaces the environment; a dict override wins per key.
        threshold_overrides = overrides.pop("thresholds", None)
        if isinstance(threshold_overrides, AlertThresholds):
            thresholds = threshold_overrides
        else:
            threshold_kwargs: dict[str, Any] = dict(threshold_overrides or {})
            for env_key, field_name in _ENV_THRESHOLD_MAP.items():
                val = env.get(env_key)
                if val is not None and field_name not in threshold_kwargs:
                    threshold_kwargs[field_name] = _env_number(env_key, val, float)
            try:
                thresholds = AlertThresholds(**threshold_kwargs)
            except ValidationError as exc:
                raise FleetConfigError(f"Invalid alert thresholds: {exc}") from exc

        config_kwargs: dict[str, Any] = {"thresholds": thresholds}

        _ENV_NUMERIC_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
            "EVFLEET_SIMULATION_INTERVAL_MS": ("simulation_interval_ms", int),
            "EVFLEET_ALERT_RETENTION_HOURS": ("alert_retention_hours", float),
            "EVFLEET_SEED": ("seed", int),
            "EVFLEET_PORT": ("port", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        _ENV_TEXT_MAP = {
            "EVFLEET_ALERT_DEDUP": "alert_dedup",
            "EVFLEET_HOST": "host",
            "EVFLEET_LOG_LEVEL": "log_level",
        }
        for env_key, field_name in _ENV_TEXT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val.strip()

        if "autostart_simulation" not in overrides:
            config_kwargs["autostart_simulation"] = _env_bool(env.get("EVFLEET_AUTOSTART"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
