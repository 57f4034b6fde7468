"""Threshold alerts over vehicle telemetry."""

from evfleet.alerts.engine import AlertDedup, AlertEngine
from evfleet.alerts.rules import DEFAULT_RULES, AlertRule, RuleHit

__all__ = ["AlertDedup", "AlertEngine", "AlertRule", "DEFAULT_RULES", "RuleHit"]
