#!/usr/bin/env python3
"""
Tests for the in-memory telemetry feed.
"""

from __future__ import annotations

import unittest

from feed import TelemetryFeed


class TelemetryFeedTests(unittest.TestCase):
    def test_publish_then_poll_drains(self) -> None:
        feed = TelemetryFeed()
        first = feed.publish("fleet.telemetry", "engine", {"tick": 1})
        feed.publish("fleet.telemetry", "engine", {"tick": 2})

        msgs = feed.poll("fleet.telemetry")
        self.assertEqual([m.payload["tick"] for m in msgs], [1, 2])
        self.assertEqual(msgs[0].id, first)
        self.assertEqual(feed.poll("fleet.telemetry"), [])
        self.assertEqual(feed.metrics.report(), {"published": 2, "delivered": 2, "evicted": 0})

    def test_topics_are_separate(self) -> None:
        feed = TelemetryFeed()
        feed.publish("a", "x", {})
        self.assertEqual(feed.poll("b"), [])
        self.assertEqual(feed.backlog("a"), 1)

    def test_backlog_evicts_oldest(self) -> None:
        feed = TelemetryFeed(max_backlog=2)
        with self.assertLogs("feed.feed", level="WARNING"):
            for tick in range(3):
                feed.publish("fleet.telemetry", "engine", {"tick": tick})

        self.assertEqual(feed.backlog("fleet.telemetry"), 2)
        self.assertEqual(
            [m.payload["tick"] for m in feed.poll("fleet.telemetry")], [1, 2],
        )
        self.assertEqual(feed.metrics.evicted, 1)

    def test_latest_does_not_consume(self) -> None:
        feed = TelemetryFeed()
        self.assertIsNone(feed.latest("fleet.telemetry"))
        feed.publish("fleet.telemetry", "engine", {"tick": 1})
        feed.publish("fleet.telemetry", "engine", {"tick": 2})

        self.assertEqual(feed.latest("fleet.telemetry").payload["tick"], 2)
        self.assertEqual(feed.backlog("fleet.telemetry"), 2)


if __name__ == "__main__":
    unittest.main()
