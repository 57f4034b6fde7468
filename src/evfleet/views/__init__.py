"""Derived, read-only views over the vehicle collection."""

from evfleet.views.filters import (
    clear_filters,
    filter_counts,
    filter_vehicles,
    matches,
    toggle_charging,
    toggle_status,
)
from evfleet.views.sorting import sort_vehicles
from evfleet.views.stats import fleet_stats

__all__ = [
    "clear_filters",
    "filter_counts",
    "filter_vehicles",
    "fleet_stats",
    "matches",
    "sort_vehicles",
    "toggle_charging",
    "toggle_status",
]
