"""
sim/analytics.py
================
Fleet-level metrics derived from tick snapshots.

Nothing here feeds back into the simulation; these helpers back the
dashboard counters, the alert list, the risk-trend chart and the CSV
risk-assessment report.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Deque, Dict, List, Sequence, Union

import numpy as np
import pandas as pd

from sim.incidents import Incident, Severity
from sim.risk_policy import DEFAULT_POLICY, RiskPolicy, round_half_up
from sim.telemetry import FACTOR_DANGEROUS_OVERTAKE, RiskLevel, VehicleTelemetry

log = logging.getLogger("analytics")

FLEET_COLUMNS = [
    "id", "plate_number", "driver_name", "speed", "x", "y", "lat", "lng",
    "heading", "risk_score", "risk_level", "factors", "status",
    "vertical_g", "last_update",
]

REPORT_COLUMNS = [
    "id", "plate_number", "driver_name", "risk_score", "risk_level",
    "factors", "speed", "vertical_g", "lat", "lng", "last_update",
]


def fleet_frame(vehicles: Sequence[VehicleTelemetry]) -> pd.DataFrame:
    """One row per vehicle; factors are joined with ``"; "``."""
    rows = [
        {
            "id": v.id,
            "plate_number": v.plate_number,
            "driver_name": v.driver_name,
            "speed": v.speed,
            "x": v.x,
            "y": v.y,
            "lat": v.lat,
            "lng": v.lng,
            "heading": v.heading,
            "risk_score": v.risk_score,
            "risk_level": v.risk_level.value,
            "factors": "; ".join(v.factors),
            "status": v.status.value,
            "vertical_g": v.vertical_g,
            "last_update": v.last_update,
        }
        for v in vehicles
    ]
    return pd.DataFrame(rows, columns=FLEET_COLUMNS)


@dataclass(frozen=True)
class FleetSummary:
    vehicle_count: int
    avg_risk: int
    high_risk_count: int
    level_counts: Dict[str, int] = field(default_factory=dict)
    shock_count: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _empty_level_counts() -> Dict[str, int]:
    return {level.value: 0 for level in RiskLevel}


def summarize(
    vehicles: Sequence[VehicleTelemetry],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> FleetSummary:
    """Dashboard counters for the current snapshot."""
    level_counts = _empty_level_counts()
    if not vehicles:
        return FleetSummary(0, 0, 0, level_counts, 0)

    scores = np.array([v.risk_score for v in vehicles], dtype=float)
    g_values = np.array([v.vertical_g for v in vehicles], dtype=float)
    for v in vehicles:
        level_counts[v.risk_level.value] += 1

    return FleetSummary(
        vehicle_count=len(vehicles),
        avg_risk=round_half_up(float(scores.mean())),
        high_risk_count=int((scores > policy.high_above).sum()),
        level_counts=level_counts,
        shock_count=int((g_values >= policy.shock_g_threshold).sum()),
    )


def risk_alerts(
    vehicles: Sequence[VehicleTelemetry],
    threshold: int = DEFAULT_POLICY.moderate_above,
) -> List[VehicleTelemetry]:
    """Vehicles scoring above *threshold*, highest risk first."""
    flagged = [v for v in vehicles if v.risk_score > threshold]
    return sorted(flagged, key=lambda v: v.risk_score, reverse=True)


def severity_breakdown(incidents: Sequence[Incident]) -> Dict[str, int]:
    """Incident counts keyed ``Minor``, ``Major``, ``Critical`` in that order."""
    counts = {severity.label: 0 for severity in Severity}
    for incident in incidents:
        counts[incident.severity.label] += 1
    return counts


# ── Risk trend ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TrendPoint:
    time: str
    avg_risk: int
    incidents: int


class RiskTrend:
    """Rolling history of fleet average risk, one point per tick.

    ``incidents`` counts open logged incidents plus vehicles flagged
    with a dangerous overtake on that tick.
    """

    def __init__(self, maxlen: int = 240) -> None:
        self._points: Deque[TrendPoint] = deque(maxlen=max(1, int(maxlen)))

    def __len__(self) -> int:
        return len(self._points)

    def record(
        self,
        time_label: str,
        vehicles: Sequence[VehicleTelemetry],
        incidents: Sequence[Incident] = (),
    ) -> TrendPoint:
        live = sum(1 for v in vehicles if FACTOR_DANGEROUS_OVERTAKE in v.factors)
        logged = sum(1 for incident in incidents if incident.is_open)
        point = TrendPoint(
            time=time_label,
            avg_risk=summarize(vehicles).avg_risk,
            incidents=live + logged,
        )
        self._points.append(point)
        return point

    def points(self) -> List[TrendPoint]:
        return list(self._points)

    def clear(self) -> None:
        self._points.clear()


# ── Report export ─────────────────────────────────────────────────────────────

def export_report(
    vehicles: Sequence[VehicleTelemetry],
    path: Union[str, Path],
) -> Path:
    """Write the risk-assessment report as CSV, highest risk first."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    frame = fleet_frame(vehicles).sort_values(
        "risk_score", ascending=False, kind="stable",
    )
    frame[REPORT_COLUMNS].to_csv(out, index=False)
    log.info("Risk report written to %s (%d vehicles)", out, len(frame))
    return out
