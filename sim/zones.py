"""
sim/zones.py
============
Static hazard-zone table.

A :class:`HazardZone` is an axis-aligned rectangle on the same normalized
plane as :mod:`sim.network`, tagged with a road condition.  Zones may
overlap.  Only ``Bumpy`` zones change vehicle behaviour today; the other
conditions are carried for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class RoadCondition(str, Enum):
    NORMAL = "Normal"
    BUMPY = "Bumpy"
    CONSTRUCTION = "Construction"


@dataclass(frozen=True)
class ZoneBounds:
    """Inclusive bounding box."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self) -> None:
        if self.x_min > self.x_max or self.y_min > self.y_max:
            raise ValueError(f"inverted zone bounds: {self}")

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


@dataclass(frozen=True)
class HazardZone:
    id: str
    condition: RoadCondition
    bounds: ZoneBounds
    label: str

    def contains(self, x: float, y: float) -> bool:
        return self.bounds.contains(x, y)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.condition.value,
            "bounds": {
                "xMin": self.bounds.x_min,
                "xMax": self.bounds.x_max,
                "yMin": self.bounds.y_min,
                "yMax": self.bounds.y_max,
            },
            "label": self.label,
        }


HAZARD_ZONES: Tuple[HazardZone, ...] = (
    HazardZone(
        id="zone_bumpy_1",
        condition=RoadCondition.BUMPY,
        bounds=ZoneBounds(x_min=60, x_max=95, y_min=0, y_max=10),
        label="Ring Road South: damaged surface",
    ),
    HazardZone(
        id="zone_bumpy_2",
        condition=RoadCondition.BUMPY,
        bounds=ZoneBounds(x_min=20, x_max=30, y_min=60, y_max=90),
        label="Inner Street 1: speed bumps",
    ),
    HazardZone(
        id="zone_construction_1",
        condition=RoadCondition.CONSTRUCTION,
        bounds=ZoneBounds(x_min=70, x_max=80, y_min=40, y_max=46),
        label="Khurais Rd: road works",
    ),
)


def zones_at(
    x: float,
    y: float,
    zones: Iterable[HazardZone] = HAZARD_ZONES,
    condition: Optional[RoadCondition] = None,
) -> List[HazardZone]:
    """Every zone containing *(x, y)*, optionally restricted to one *condition*."""
    return [
        zone for zone in zones
        if (condition is None or zone.condition == condition) and zone.contains(x, y)
    ]


def in_zone(
    x: float,
    y: float,
    condition: RoadCondition,
    zones: Iterable[HazardZone] = HAZARD_ZONES,
) -> bool:
    """True when *(x, y)* lies in at least one zone of *condition*."""
    return any(
        zone.condition == condition and zone.contains(x, y) for zone in zones
    )
