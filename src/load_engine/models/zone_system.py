"""Coach-owned zone systems."""

from __future__ import annotations

from dataclasses import dataclass, field

from load_engine.exceptions import InvalidZoneSystemError
from load_engine.models.enums import SportType, ZoneReferenceType


@dataclass(frozen=True)
class Zone:
    """A single intensity band, bounds in % of the system's reference."""

    label: str
    low: float
    high: float
    description: str = ""

    @property
    def midpoint(self) -> float:
        return (self.low + self.high) / 2.0


@dataclass(frozen=True)
class ZoneSystem:
    """A named set of zones for one sport and reference metric.

    A coach may mark one system per sport ``active`` (used first) and one
    ``default`` (fallback).
    """

    coach_id: str
    sport_type: SportType
    reference_type: ZoneReferenceType
    zones: tuple[Zone, ...] = field(default_factory=tuple)
    id: str | None = None
    name: str = ""
    reference_name: str = ""
    active: bool = False
    default: bool = False

    def find_zone(self, label: str | None) -> Zone | None:
        """Case-insensitive label lookup."""
        if not label:
            return None
        wanted = label.strip().casefold()
        for zone in self.zones:
            if zone.label.strip().casefold() == wanted:
                return zone
        return None


def validate_zone_system(system: ZoneSystem) -> ZoneSystem:
    """Check label uniqueness (case-insensitive) and zone bounds.

    Raises:
        InvalidZoneSystemError: on a duplicate label or ``low > high``.
    """
    seen: set[str] = set()
    for zone in system.zones:
        key = zone.label.strip().casefold()
        if key in seen:
            raise InvalidZoneSystemError(
                f"Duplicate zone label {zone.label!r} in zone system {system.name!r}"
            )
        seen.add(key)
        if zone.low > zone.high:
            raise InvalidZoneSystemError(
                f"Zone {zone.label!r} has low {zone.low} above high {zone.high}"
            )
    return system
