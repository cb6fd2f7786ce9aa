"""
TelemetryFeed: In-memory pub/sub for fleet telemetry snapshots.

Supports:
    - Topic-based messaging
    - Bounded per-topic backlog (oldest messages are evicted)
    - Non-destructive peek at the newest message
    - Logging of events

Intended usage:
    - The simulation bridge publishes each tick's fleet to 'fleet.telemetry'
    - Dashboards and exporters poll the topic or peek at the latest message
"""

import time
import uuid
import logging
from collections import deque
from typing import Deque, Dict, List, Optional

from .message import FeedMessage
from .metrics import FeedMetrics

log = logging.getLogger(__name__)


class TelemetryFeed:
    """
    Transport layer for telemetry snapshots inside one process.

    Attributes:
        max_backlog (int): Maximum number of undelivered messages kept per topic.
        metrics (FeedMetrics): Published / delivered / evicted counters.
    """

    def __init__(self, max_backlog: int = 50):
        """
        Initialize a TelemetryFeed instance.

        Args:
            max_backlog (int): Per-topic backlog size; at least 1.
        """
        self.max_backlog = max(1, int(max_backlog))
        self._topics: Dict[str, Deque[FeedMessage]] = {}
        self.metrics = FeedMetrics()

    def publish(self, topic: str, sender: str, payload: dict) -> str:
        """
        Publish a message to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'fleet.telemetry').
            sender (str): ID of the sender.
            payload (dict): Arbitrary data dictionary representing the message contents.

        Returns:
            str: The unique message ID.
        """
        queue = self._topics.setdefault(topic, deque())
        if len(queue) >= self.max_backlog:
            dropped = queue.popleft()
            self.metrics.evicted += 1
            log.warning("backlog_full topic=%s evicted=%s", topic, dropped.id)

        msg = FeedMessage(
            id=str(uuid.uuid4()),
            topic=topic,
            sender=sender,
            payload=payload,
            ts=time.time(),
        )
        queue.append(msg)
        self.metrics.published += 1
        log.debug("publish topic=%s sender=%s id=%s", topic, sender, msg.id)
        return msg.id

    def poll(self, topic: str) -> List[FeedMessage]:
        """
        Retrieve and clear all messages from a given topic.

        Args:
            topic (str): The topic name to poll messages from.

        Returns:
            List[FeedMessage]: Messages published to the topic since the last poll, oldest first.
        """
        queue = self._topics.get(topic)
        if not queue:
            return []
        msgs = list(queue)
        queue.clear()
        self.metrics.delivered += len(msgs)
        return msgs

    def latest(self, topic: str) -> Optional[FeedMessage]:
        """
        Return the newest message on a topic without consuming it.

        Args:
            topic (str): The topic name.

        Returns:
            Optional[FeedMessage]: The newest pending message, or None if the topic is empty.
        """
        queue = self._topics.get(topic)
        return queue[-1] if queue else None

    def backlog(self, topic: str) -> int:
        """Number of undelivered messages on *topic*."""
        return len(self._topics.get(topic, ()))
