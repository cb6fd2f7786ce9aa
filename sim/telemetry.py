"""
sim/telemetry.py
================
Immutable per-tick vehicle snapshot and the enums it carries.

A :class:`VehicleTelemetry` is never mutated: :mod:`sim.engine` builds a
fresh one for every vehicle on every tick with :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class RiskLevel(str, Enum):
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


class VehicleStatus(str, Enum):
    ACTIVE = "active"
    IDLE = "idle"
    INCIDENT = "incident"


# Risk factor labels
FACTOR_SPEEDING = "Speeding"
FACTOR_BUMPY_ROAD = "Bumpy Road"
FACTOR_SUSPENSION_SHOCK = "Suspension Shock"
FACTOR_FAST_ON_BUMPY = "Fast Driving on Bumpy Road"
FACTOR_DANGEROUS_OVERTAKE = "Dangerous Overtake"


@dataclass(frozen=True)
class VehicleTelemetry:
    """One vehicle at one tick.

    Attributes
    ----------
    id, plate_number, driver_name : str
        Assigned at population time and carried over unchanged.
    speed : int
        km/h.
    x, y : float
        Position on the normalized plane.
    lat, lng : float
        Geographic projection of ``(x, y)``.
    heading : float
        Degrees, 0 = up.
    risk_score : int
        0–100.
    factors : tuple of str
        Deduplicated labels explaining the current score.
    vertical_g : float
        1.0 is normal gravity; spikes mean road-surface shock.
    last_update : str
        ISO-8601 UTC timestamp.
    """

    id: str
    plate_number: str
    driver_name: str
    speed: int
    x: float
    y: float
    lat: float
    lng: float
    heading: float
    risk_score: int
    risk_level: RiskLevel = RiskLevel.LOW
    factors: Tuple[str, ...] = field(default_factory=tuple)
    status: VehicleStatus = VehicleStatus.ACTIVE
    vertical_g: float = 1.0
    last_update: str = ""

    def as_dict(self) -> Dict[str, Any]:
        """JSON-compatible mapping for the feed, the API and reports."""
        return {
            "id": self.id,
            "plateNumber": self.plate_number,
            "driverName": self.driver_name,
            "speed": self.speed,
            "coordinates": {"x": self.x, "y": self.y},
            "lat": self.lat,
            "lng": self.lng,
            "heading": self.heading,
            "riskScore": self.risk_score,
            "riskLevel": self.risk_level.value,
            "factors": list(self.factors),
            "status": self.status.value,
            "verticalG": self.vertical_g,
            "lastUpdate": self.last_update,
        }

    def advisory_payload(self) -> Dict[str, Any]:
        """The fields the risk-advisory service reasons over."""
        return {
            "id": self.id,
            "speed": self.speed,
            "verticalG": self.vertical_g,
            "riskScore": self.risk_score,
            "factors": list(self.factors),
            "status": self.status.value,
        }
