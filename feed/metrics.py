"""
FeedMetrics: Tracks simple statistics for TelemetryFeed message flow.
"""

class FeedMetrics:
    """
    Tracks metrics for published, delivered and evicted messages.

    Attributes:
        published (int): Total number of messages published.
        delivered (int): Number of messages handed to pollers.
        evicted (int): Number of messages dropped because a topic backlog was full.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.published = 0
        self.delivered = 0
        self.evicted = 0

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary containing 'published', 'delivered' and 'evicted' counters.
        """
        return {
            "published": self.published,
            "delivered": self.delivered,
            "evicted": self.evicted,
        }
