"""Filter state persistence: query-string codec, history and debounced sync."""

from evfleet.sync.filters import FilterSync
from evfleet.sync.history import NavigationHistory
from evfleet.sync.query import parse_filters, serialize_filters

__all__ = ["FilterSync", "NavigationHistory", "parse_filters", "serialize_filters"]
