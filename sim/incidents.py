"""
sim/incidents.py
================
Read-only incident history.

The log is seed data shown next to the live fleet; ticks never touch it.
Entries are ordered oldest first.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, List, Tuple


class Severity(IntEnum):
    """Ordered severity: ``MINOR < MAJOR < CRITICAL``."""

    MINOR = 1
    MAJOR = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class IncidentStatus(str, Enum):
    OPEN = "Open"
    RESOLVED = "Resolved"


@dataclass(frozen=True)
class Incident:
    id: str
    timestamp: str
    type: str
    location: str
    severity: Severity
    status: IncidentStatus

    @property
    def is_open(self) -> bool:
        return self.status == IncidentStatus.OPEN

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "type": self.type,
            "location": self.location,
            "severity": self.severity.label,
            "status": self.status.value,
        }


_SEED_INCIDENTS: Tuple[Incident, ...] = (
    Incident(
        id="INC-001",
        timestamp="10:42",
        type="Harsh Braking",
        location="King Fahd Rd",
        severity=Severity.MAJOR,
        status=IncidentStatus.RESOLVED,
    ),
    Incident(
        id="INC-002",
        timestamp="11:15",
        type="Speeding",
        location="Northern Ring Rd",
        severity=Severity.CRITICAL,
        status=IncidentStatus.OPEN,
    ),
    Incident(
        id="INC-003",
        timestamp="11:30",
        type="Dangerous Swerve",
        location="Khurais Rd",
        severity=Severity.MINOR,
        status=IncidentStatus.OPEN,
    ),
)


def incident_history() -> List[Incident]:
    """Fresh list of the seed incidents, oldest first."""
    return list(_SEED_INCIDENTS)
