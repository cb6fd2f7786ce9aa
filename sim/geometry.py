#!/usr/bin/env python3
"""
sim/geometry.py
===============
Low-level geometry helpers used by :mod:`sim.network` and :mod:`sim.engine`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.  Everything here is a pure function of its
arguments: no randomness, no module state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

Point = Tuple[float, float]

PLANE_SIZE: float = 100.0
"""Side length of the normalized map plane shared by roads and zones."""


@dataclass(frozen=True)
class GeoBounds:
    """Geographic box the normalized plane is projected onto."""

    lat_min: float
    lat_max: float
    lng_min: float
    lng_max: float


# Approximate bounding box for Riyadh (display only)
RIYADH_BOUNDS = GeoBounds(lat_min=24.60, lat_max=24.85, lng_min=46.60, lng_max=46.85)


def _heading_deg(p1: Point, p2: Point) -> float:
    """Travel heading from *p1* to *p2*, rotated so 0° points up."""
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    return math.degrees(math.atan2(dy, dx)) + 90.0


def position_at(points: Sequence[Point], progress: float) -> Tuple[float, float, float]:
    """Interpolate ``(x, y, heading)`` at fractional *progress* along a polyline.

    Every sub-segment covers an equal share of ``[0, 1]`` regardless of
    its physical length.

    Parameters
    ----------
    points : sequence of (x, y)
        At least two waypoints.
    progress : float
        Position along the whole polyline; values outside ``[0, 1]`` are
        pinned to the nearest end.

    Returns
    -------
    tuple
        ``(x, y, heading_deg)``.  Progress 0 and 1 return the first and
        last waypoint exactly.
    """
    total_segments = len(points) - 1
    if progress <= 0.0:
        x, y = points[0]
        return float(x), float(y), _heading_deg(points[0], points[1])
    if progress >= 1.0:
        x, y = points[-1]
        return float(x), float(y), _heading_deg(points[-2], points[-1])

    segment_length = 1.0 / total_segments
    index = min(int(math.floor(progress / segment_length)), total_segments - 1)
    local = (progress - index * segment_length) / segment_length

    p1 = points[index]
    p2 = points[index + 1]
    x = p1[0] + (p2[0] - p1[0]) * local
    y = p1[1] + (p2[1] - p1[1]) * local
    return x, y, _heading_deg(p1, p2)


def to_lat_lng(x: float, y: float, bounds: GeoBounds = RIYADH_BOUNDS) -> Tuple[float, float]:
    """Project plane coordinates to ``(lat, lng)``; north is up, so *y* is inverted."""
    lng = bounds.lng_min + (x / PLANE_SIZE) * (bounds.lng_max - bounds.lng_min)
    lat = bounds.lat_max - (y / PLANE_SIZE) * (bounds.lat_max - bounds.lat_min)
    return lat, lng


def progress_delta(speed_kmh: float, scale_kmh: float) -> float:
    """Fraction of a path covered in one tick at *speed_kmh*.

    *scale_kmh* is the speed that covers a whole path in a single tick;
    it fixes the simulated world size.
    """
    return max(0.0, float(speed_kmh)) / scale_kmh


def near_point(x: float, y: float, cx: float, cy: float, radius: float) -> bool:
    """True when *(x, y)* is strictly within *radius* of *(cx, cy)* on both axes."""
    return abs(x - cx) < radius and abs(y - cy) < radius
