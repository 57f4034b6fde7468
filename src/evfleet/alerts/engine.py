"""Alert engine: rule evaluation and alert lifecycle.

The engine is the single owner of the alert list. On every observation
of the fleet it:

1. evaluates every rule for every vehicle (a failing rule is logged and
   skipped, it never aborts the pass);
2. keeps stored alerts that are younger than the retention window and
   not dismissed;
3. appends the new alerts that do not duplicate a kept one, and carries
   the current severity and wording onto the kept ones.

What counts as a duplicate is the :class:`AlertDedup` policy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from enum import StrEnum

from evfleet._constants import ALERT_RETENTION_HOURS
from evfleet.alerts.rules import DEFAULT_RULES, AlertRule
from evfleet.models.alert import DEFAULT_THRESHOLDS, Alert, AlertSeverity, AlertThresholds
from evfleet.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

AlertListener = Callable[[tuple[Alert, ...]], None]


class AlertDedup(StrEnum):
    EXACT_ID = "exact_id"
    """Skip a new alert only if its id is already stored."""
    RULE = "rule"
    """Keep one live alert per vehicle and type, refreshing its severity and wording."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _epoch_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class AlertEngine:
    """Evaluate threshold rules and manage read/dismiss/retention state."""

    def __init__(
        self,
        *,
        thresholds: AlertThresholds = DEFAULT_THRESHOLDS,
        retention: timedelta = timedelta(hours=ALERT_RETENTION_HOURS),
        dedup: AlertDedup | str = AlertDedup.RULE,
        clock: Callable[[], datetime] = _utcnow,
        rules: Iterable[AlertRule] = DEFAULT_RULES,
    ) -> None:
        self._thresholds = thresholds
        self._retention = retention
        self._dedup = AlertDedup(dedup)
        self._clock = clock
        self._rules = tuple(rules)
        self._alerts: list[Alert] = []
        self._listeners: list[AlertListener] = []

    @property
    def thresholds(self) -> AlertThresholds:
        return self._thresholds

    @property
    def dedup(self) -> AlertDedup:
        return self._dedup

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, vehicles: Iterable[Vehicle], *, now_ms: int | None = None) -> list[Alert]:
        """Run every rule against every vehicle and return the triggered alerts."""
        timestamp = _epoch_ms(self._clock()) if now_ms is None else now_ms
        triggered: list[Alert] = []
        for vehicle in vehicles:
            for rule in self._rules:
                try:
                    hit = rule.check(vehicle, self._thresholds)
                except Exception:
                    _logger.warning("Alert rule %s failed for %s", rule.type, vehicle.id, exc_info=True)
                    continue
                if hit is None:
                    continue
                triggered.append(
                    Alert(
                        id=f"{vehicle.id}_{timestamp}_{rule.suffix}",
                        vehicle_id=vehicle.id,
                        vehicle_name=vehicle.name,
                        type=rule.type,
                        severity=hit.severity,
                        title=hit.title,
                        message=hit.message,
                        timestamp=timestamp,
                    )
                )
        return triggered

    def observe(self, vehicles: Iterable[Vehicle]) -> tuple[Alert, ...]:
        """Evaluate *vehicles* and merge the result into the stored alerts.

        Returns the active (non-dismissed) alerts after the merge.
        """
        now_ms = _epoch_ms(self._clock())
        new_alerts = self.evaluate(vehicles, now_ms=now_ms)

        cutoff = now_ms - int(self._retention.total_seconds() * 1000)
        retained = [alert for alert in self._alerts if alert.timestamp > cutoff and not alert.is_dismissed]

        if self._dedup == AlertDedup.RULE:
            live = {(alert.vehicle_id, alert.type): index for index, alert in enumerate(retained)}
            fresh: list[Alert] = []
            for alert in new_alerts:
                index = live.get((alert.vehicle_id, alert.type))
                if index is None:
                    fresh.append(alert)
                else:
                    retained[index] = self._refresh(retained[index], alert)
        else:
            known_ids = {alert.id for alert in retained}
            fresh = [alert for alert in new_alerts if alert.id not in known_ids]

        dropped = len(self._alerts) - len(retained)
        self._alerts = retained + fresh
        if fresh or dropped:
            _logger.debug("Alerts merged new=%d dropped=%d total=%d", len(fresh), dropped, len(self._alerts))
        self._notify()
        return self.active_alerts

    @staticmethod
    def _refresh(current: Alert, latest: Alert) -> Alert:
        """Carry the latest severity and wording onto a live alert; id, timestamp and read state stay."""
        changes = {
            "severity": latest.severity,
            "title": latest.title,
            "message": latest.message,
        }
        if all(getattr(current, field) == value for field, value in changes.items()):
            return current
        if latest.severity != current.severity:
            _logger.debug("Alert %s severity %s -> %s", current.id, current.severity, latest.severity)
        return current.model_copy(update=changes)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _update(self, alert_id: str, **changes: bool) -> bool:
        for index, alert in enumerate(self._alerts):
            if alert.id == alert_id:
                self._alerts[index] = alert.model_copy(update=changes)
                self._notify()
                return True
        _logger.debug("Alert %s not found", alert_id)
        return False

    def mark_as_read(self, alert_id: str) -> bool:
        return self._update(alert_id, is_read=True)

    def dismiss(self, alert_id: str) -> bool:
        """Tombstone an alert; it stays stored until :meth:`clear_dismissed` or the next merge."""
        return self._update(alert_id, is_dismissed=True)

    def mark_all_as_read(self) -> None:
        self._alerts = [alert.model_copy(update={"is_read": True}) for alert in self._alerts]
        self._notify()

    def clear_dismissed(self) -> int:
        """Hard-remove dismissed alerts and return how many were removed."""
        before = len(self._alerts)
        self._alerts = [alert for alert in self._alerts if not alert.is_dismissed]
        removed = before - len(self._alerts)
        if removed:
            self._notify()
        return removed

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def alerts(self) -> tuple[Alert, ...]:
        """Every stored alert, dismissed tombstones included."""
        return tuple(self._alerts)

    @property
    def active_alerts(self) -> tuple[Alert, ...]:
        return tuple(alert for alert in self._alerts if not alert.is_dismissed)

    @property
    def unread_count(self) -> int:
        return sum(1 for alert in self.active_alerts if not alert.is_read)

    @property
    def critical_count(self) -> int:
        return sum(1 for alert in self.active_alerts if alert.severity == AlertSeverity.CRITICAL)

    @property
    def alerts_by_vehicle(self) -> dict[str, list[Alert]]:
        grouped: dict[str, list[Alert]] = {}
        for alert in self.active_alerts:
            grouped.setdefault(alert.vehicle_id, []).append(alert)
        return grouped

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: AlertListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        active = self.active_alerts
        for listener in list(self._listeners):
            try:
                listener(active)
            except Exception:
                _logger.warning("Alert listener failed", exc_info=True)
