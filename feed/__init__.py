"""
feed — In-memory telemetry feed
================================

Provides a lightweight topic pub/sub layer the simulation bridge uses to
hand each tick's fleet snapshot to dashboards, exporters and other
in-process consumers.

Modules
-------
message
    :class:`FeedMessage` dataclass.
feed
    :class:`TelemetryFeed` publish / poll / latest transport.
metrics
    :class:`FeedMetrics` counter snapshot.
"""

from .message import FeedMessage
from .feed import TelemetryFeed
from .metrics import FeedMetrics

__all__ = [
    "FeedMessage",
    "TelemetryFeed",
    "FeedMetrics",
]
