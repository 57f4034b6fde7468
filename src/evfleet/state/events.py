"""Store change notifications.

Every mutation of the vehicle store is announced to subscribers as a
:class:`StoreChange`. Subscribers re-derive their views from the store's
read-only snapshot; the event only says what moved.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ChangeKind(StrEnum):
    TELEMETRY = "telemetry"
    STATUS = "status"
    SIMULATION = "simulation"


class StoreChange(BaseModel):
    """A single store mutation."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    vehicle_ids: tuple[str, ...] = Field(default=(), description="Vehicles touched by the change")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
