"""Base model for evfleet snapshots.

Every snapshot model inherits from :class:`FleetBaseModel` which
provides:

* ``alias_generator=to_camel`` so snake_case fields dump to the
  camelCase keys render consumers expect (``batteryLevel``,
  ``lastUpdated``...).
* ``populate_by_name=True`` so either spelling is accepted on input.
* ``frozen=True``: snapshots handed out by the engines are read-only;
  owners replace them with ``model_copy(update=...)``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class FleetBaseModel(BaseModel):
    """Base for immutable, camelCase-serializable snapshot models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Dump using camelCase aliases and JSON-safe values."""
        return self.model_dump(mode="json", by_alias=True)


def field_name_map(model: type[BaseModel]) -> dict[str, str]:
    """Return ``{alias_or_name: field_name}`` for every field of *model*."""
    mapping: dict[str, str] = {}
    for name, info in model.model_fields.items():
        mapping[name] = name
        if info.alias:
            mapping[info.alias] = name
    return mapping
