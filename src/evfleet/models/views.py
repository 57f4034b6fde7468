"""Filter, sort and aggregate view models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import field_validator

from evfleet.models._base import FleetBaseModel


def _unique_tokens(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = (value,)
    seen: list[str] = []
    for item in value:
        token = str(item)
        if token not in seen:
            seen.append(token)
    return tuple(seen)


class FilterState(FleetBaseModel):
    """Multi-select filter.

    Each field is an insertion-ordered, duplicate-free tuple of tokens.
    An empty tuple means "no restriction". Tokens are not validated
    against the enums, so values read from an external query string
    survive unchanged.
    """

    status: tuple[str, ...] = ()
    charging: tuple[str, ...] = ()

    @field_validator("status", "charging", mode="before")
    @classmethod
    def _dedupe(cls, value: Any) -> tuple[str, ...]:
        return _unique_tokens(value)

    @property
    def is_empty(self) -> bool:
        return not self.status and not self.charging


class FilterCounts(FleetBaseModel):
    """Per-option vehicle counts over the unfiltered fleet."""

    total: int = 0
    active: int = 0
    inactive: int = 0
    maintenance: int = 0
    charging: int = 0
    discharging: int = 0
    idle: int = 0


class SortOption(StrEnum):
    NAME = "name"
    BATTERY = "battery"
    SPEED = "speed"
    ODOMETER = "odometer"
    STATUS = "status"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortState(FleetBaseModel):
    option: SortOption = SortOption.NAME
    order: SortOrder = SortOrder.ASC

    def with_option(self, option: SortOption | str) -> SortState:
        return self.model_copy(update={"option": SortOption(option)})

    def with_order(self, order: SortOrder | str) -> SortState:
        return self.model_copy(update={"order": SortOrder(order)})

    def toggled(self) -> SortState:
        """Return the same sort with the opposite direction."""
        flipped = SortOrder.DESC if self.order == SortOrder.ASC else SortOrder.ASC
        return self.model_copy(update={"order": flipped})


class FleetStats(FleetBaseModel):
    """Fleet overview figures.

    ``average_speed`` only considers active vehicles.
    """

    total: int = 0
    active: int = 0
    inactive: int = 0
    maintenance: int = 0
    charging: int = 0
    average_battery: int = 0
    average_speed: int = 0
    total_odometer: float = 0
