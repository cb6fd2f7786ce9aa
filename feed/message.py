"""
FeedMessage: One envelope carried by the TelemetryFeed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FeedMessage:
    """
    Immutable envelope for one published telemetry payload.

    Attributes:
        id (str): uuid4 string assigned at publish time.
        topic (str): Topic the envelope was published on (e.g., 'fleet.telemetry').
        sender (str): Publisher name (e.g., 'sim_bridge').
        payload (dict): JSON-compatible body; for fleet ticks ``{"tick", "vehicles"}``.
        ts (float): Wall-clock publish time from ``time.time()``.
    """
    id: str
    topic: str
    sender: str
    payload: dict
    ts: float
