from __future__ import annotations

import os
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from evfleet.models.telemetry import TelemetrySnapshot
from evfleet.models.vehicle import Vehicle

EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


class ManualHandle:
    def __init__(self, when: float, seq: int, callback: Callable[[], None]) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose time only moves when the test calls :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._seq = 0
        self._handles: list[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        self._seq += 1
        handle = ManualHandle(self.now + max(0.0, delay), self._seq, callback)
        self._handles.append(handle)
        return handle

    @property
    def live_handles(self) -> list[ManualHandle]:
        return [handle for handle in self._handles if not handle.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [handle for handle in self.live_handles if handle.when <= target]
            if not due:
                break
            handle = min(due, key=lambda item: (item.when, item.seq))
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self._handles = self.live_handles
        self.now = target

    def clock(self) -> datetime:
        return EPOCH + timedelta(seconds=self.now)


class FailingScheduler:
    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        raise RuntimeError("no event loop")


def build_vehicle(
    vehicle_id: str = "EV-001",
    *,
    status: str = "active",
    name: str | None = None,
    last_updated: datetime = EPOCH,
    **telemetry: Any,
) -> Vehicle:
    values: dict[str, Any] = {
        "speed": 50,
        "battery_level": 80,
        "temperature": 30,
        "tire_pressure": 32,
        "motor_efficiency": 90,
        "regenerative_braking": False,
        "location": {"lat": 40.7128, "lng": -74.0060},
        "odometer": 20_000,
        "energy_consumption": 20,
        "charging_status": "discharging",
        "voltage": 400,
        "current": 100,
    }
    values.update(telemetry)
    return Vehicle(
        id=vehicle_id,
        name=name or f"Vehicle {vehicle_id}",
        model="Test Model",
        status=status,
        telemetry=TelemetrySnapshot(**values),
        last_updated=last_updated,
    )


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def failing_scheduler() -> FailingScheduler:
    return FailingScheduler()


@pytest.fixture
def make_vehicle() -> Callable[..., Vehicle]:
    return build_vehicle


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in list(os.environ):
        if key.startswith("EVFLEET_"):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
