"""
sim/network.py
==============
Road-network layout for the fleet simulation.

Defines :class:`RoadSegment`, an immutable polyline on the normalized
``[0, 100] x [0, 100]`` plane, and :class:`RoadNetwork`, the ordered list
of segments vehicles are assigned to.

:func:`default_network` builds the fixed city layout (:data:`ROAD_NETWORKS`).
The map renderer draws the same polylines, so the lines on screen match
exactly where the cars drive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from sim.geometry import Point, position_at

HIGHWAY = "highway"
STREET = "street"
_CATEGORIES = (HIGHWAY, STREET)


# ── Road segment ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RoadSegment:
    """One drivable polyline.

    Parameters
    ----------
    id : str
        Unique identifier (e.g. ``"ring_road"``).
    width : int
        Rendering width; has no effect on motion.
    category : str
        ``"highway"`` or ``"street"``.
    points : tuple of (x, y)
        Ordered waypoints, at least two.
    """

    id: str
    width: int
    category: str
    points: Tuple[Point, ...]

    def __post_init__(self) -> None:
        if len(self.points) < 2:
            raise ValueError(f"road {self.id!r} needs at least 2 waypoints")
        if self.category not in _CATEGORIES:
            raise ValueError(f"road {self.id!r} has unknown category {self.category!r}")

    @property
    def sub_segment_count(self) -> int:
        return len(self.points) - 1

    def position_at(self, progress: float) -> Tuple[float, float, float]:
        """``(x, y, heading)`` at fractional *progress* along this road."""
        return position_at(self.points, progress)

    def as_dict(self) -> dict:
        """Map-layer shape: ``{"id", "width", "type", "points": [{"x", "y"}]}``."""
        return {
            "id": self.id,
            "width": self.width,
            "type": self.category,
            "points": [{"x": x, "y": y} for x, y in self.points],
        }


def _road(road_id: str, width: int, category: str, points: Sequence[Point]) -> RoadSegment:
    return RoadSegment(id=road_id, width=width, category=category, points=tuple(points))


ROAD_NETWORKS: Tuple[RoadSegment, ...] = (
    # Outer ring road
    _road("ring_road", 4, HIGHWAY, [(5, 5), (95, 5), (95, 95), (5, 95), (5, 5)]),
    # Main vertical artery (King Fahd Rd)
    _road("main_vertical", 4, HIGHWAY, [(50, 0), (50, 100)]),
    # Main horizontal artery (Khurais Rd)
    _road("main_horizontal", 4, HIGHWAY, [(0, 50), (100, 50)]),
    # Inner city grid
    _road("inner_1", 2, STREET, [(25, 5), (25, 95)]),
    _road("inner_2", 2, STREET, [(75, 5), (75, 95)]),
    _road("inner_3", 2, STREET, [(5, 25), (95, 25)]),
    _road("inner_4", 2, STREET, [(5, 75), (95, 75)]),
    # Diagonal connector
    _road("diag_1", 2, STREET, [(5, 50), (50, 25), (95, 5)]),
)


# ── Road network ──────────────────────────────────────────────────────────────

class RoadNetwork:
    """Ordered, immutable collection of :class:`RoadSegment`.

    Vehicles reference roads by index, so the order of *segments* is part
    of the contract: vehicle ``i`` drives on ``segments[i % len(network)]``.
    """

    def __init__(self, segments: Sequence[RoadSegment]) -> None:
        if not segments:
            raise ValueError("a road network needs at least one segment")
        self._segments: Tuple[RoadSegment, ...] = tuple(segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, index: int) -> RoadSegment:
        return self._segments[index]

    def __iter__(self) -> Iterator[RoadSegment]:
        return iter(self._segments)

    @property
    def ids(self) -> List[str]:
        return [segment.id for segment in self._segments]

    def segment_for(self, vehicle_index: int) -> Tuple[int, RoadSegment]:
        """Round-robin assignment: ``(road_index, road)`` for the *vehicle_index*-th car."""
        road_index = vehicle_index % len(self._segments)
        return road_index, self._segments[road_index]


def default_network() -> RoadNetwork:
    """The fixed city layout used by the simulator and the map view."""
    return RoadNetwork(ROAD_NETWORKS)
