"""
sim/sim_bridge.py
=================
Background-thread orchestrator tying :mod:`sim.engine`, the
:class:`feed.TelemetryFeed`, fleet analytics and the risk-advisory client
together.  Readers (the REST API, a dashboard) poll the bridge for the
latest snapshot without blocking the tick loop.

Public API consumed by :mod:`server.api`
----------------------------------------
* ``get_vehicles()``             → ``List[dict]``
* ``get_vehicle(id)``            → ``dict``
* ``get_summary()``              → ``dict``
* ``get_alerts()``               → ``List[dict]``
* ``get_incidents()``            → ``List[dict]``
* ``get_trend()``                → ``List[dict]``
* ``get_map()``                  → ``dict``
* ``request_advice(id, lang)``   → ``RiskAdvice``
* ``request_location_insight(id, lang)`` → ``LocationInsight``
* ``export_report(path)``        → ``Path``
* ``reset()`` / ``set_paused(bool)`` / ``step()``
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from advisory import AdvisoryClient, Language, LocationInsight, RiskAdvice
from config import (
    ALERT_RISK_THRESHOLD,
    DEFAULT_TICK_INTERVAL_S,
    DEFAULT_VEHICLE_COUNT,
    FEED_MAX_BACKLOG,
    FEED_TOPIC_TELEMETRY,
    REPORT_DIR,
    TREND_MAX_POINTS,
)
from feed import TelemetryFeed
from sim.analytics import (
    RiskTrend,
    export_report,
    risk_alerts,
    severity_breakdown,
    summarize,
)
from sim.engine import TelemetryEngine
from sim.incidents import Incident
from sim.risk_policy import RiskPolicy
from sim.telemetry import VehicleTelemetry

log = logging.getLogger("sim_bridge")


def _time_label() -> str:
    return datetime.now(timezone.utc).strftime("%H:%M:%S")


class SimBridge:
    """Simulation orchestrator running in a background thread.

    The thread calls :meth:`step` every ``tick_interval_s`` seconds,
    advancing the :class:`~sim.engine.TelemetryEngine`, publishing the
    fleet on the feed, recording a trend point, and caching the results
    for readers.  Ticks never overlap: the loop is single-threaded and
    :meth:`step` holds the tick lock for its whole duration.

    Parameters
    ----------
    tick_interval_s : float
        Seconds between ticks.
    vehicle_count : int
        Number of vehicles to create.
    random_seed : int or None
        Seed for reproducibility.
    policy : RiskPolicy or None
        Tunable constants.
    feed : TelemetryFeed or None
        Where tick snapshots are published.
    advisory : AdvisoryClient or None
        Risk-advisory client used by :meth:`request_advice`.
    """

    def __init__(
        self,
        tick_interval_s: float = DEFAULT_TICK_INTERVAL_S,
        vehicle_count: int = DEFAULT_VEHICLE_COUNT,
        random_seed: Optional[int] = None,
        policy: Optional[RiskPolicy] = None,
        feed: Optional[TelemetryFeed] = None,
        advisory: Optional[AdvisoryClient] = None,
    ) -> None:
        self._tick_interval_s = max(0.01, float(tick_interval_s))
        self._vehicle_count = max(0, int(vehicle_count))

        self._engine = TelemetryEngine(seed=random_seed, policy=policy)
        self._feed = feed or TelemetryFeed(max_backlog=FEED_MAX_BACKLOG)
        self._advisory = advisory or AdvisoryClient()
        self._trend = RiskTrend(maxlen=TREND_MAX_POINTS)

        # Serializes ticks, resets and snapshot swaps.
        self._lock = threading.Lock()

        self._vehicles: List[VehicleTelemetry] = self._engine.initialize_population(
            self._vehicle_count
        )
        self._incidents: List[Incident] = self._engine.incident_history()
        self._advice_cache: Dict[str, RiskAdvice] = {}

        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._paused = False

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the background simulation thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="SimBridge"
        )
        self._thread.start()
        log.info("SimBridge started, one tick every %.2f s", self._tick_interval_s)

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to join."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0 + self._tick_interval_s)
            self._thread = None
        log.info("SimBridge stopped")

    @property
    def running(self) -> bool:
        return self._running

    @property
    def feed(self) -> TelemetryFeed:
        return self._feed

    @property
    def tick_count(self) -> int:
        return self._engine.tick_count

    # ── Reader API ────────────────────────────────────────────────────────────

    def get_vehicles(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [v.as_dict() for v in self._vehicles]

    def get_vehicle(self, vehicle_id: str) -> Dict[str, Any]:
        """Raises :class:`KeyError` for an unknown id."""
        return self._snapshot_for(vehicle_id).as_dict()

    def get_summary(self) -> Dict[str, Any]:
        """Fleet counters plus the incident severity breakdown."""
        with self._lock:
            summary = summarize(self._vehicles, self._engine.policy)
        data = summary.as_dict()
        data["incident_severity"] = severity_breakdown(self._incidents)
        return data

    def get_alerts(self) -> List[Dict[str, Any]]:
        with self._lock:
            flagged = risk_alerts(self._vehicles, ALERT_RISK_THRESHOLD)
        return [v.as_dict() for v in flagged]

    def get_incidents(self) -> List[Dict[str, Any]]:
        return [incident.as_dict() for incident in self._incidents]

    def get_map(self) -> Dict[str, List[Dict[str, Any]]]:
        """Static map layers: road polylines and hazard zones."""
        return {
            "roads": [road.as_dict() for road in self._engine.network],
            "zones": [zone.as_dict() for zone in self._engine.zones],
        }

    def get_trend(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [asdict(point) for point in self._trend.points()]

    def get_feed_metrics(self) -> Dict[str, int]:
        with self._lock:
            return self._feed.metrics.report()

    def export_report(self, path: Union[str, Path, None] = None) -> Path:
        """Write the current fleet's risk report as CSV."""
        if path is None:
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
            path = Path(REPORT_DIR) / f"risk_report_{stamp}.csv"
        with self._lock:
            vehicles = list(self._vehicles)
        return export_report(vehicles, path)

    def reset(self) -> None:
        """Re-create the fleet; the motion store is cleared by the engine."""
        with self._lock:
            self._vehicles = self._engine.initialize_population(self._vehicle_count)
            self._trend.clear()
            self._advice_cache.clear()
        log.info("SimBridge reset")

    def set_paused(self, paused: bool) -> None:
        """Pause / unpause the simulation tick."""
        self._paused = paused

    # ── Advisory ──────────────────────────────────────────────────────────────

    def request_advice(self, vehicle_id: str, lang: Language = Language.EN) -> RiskAdvice:
        """Ask the advisory service about one vehicle's current snapshot.

        Runs on the caller's thread without holding the tick lock, so a
        slow service never delays a tick.  A degraded answer is replaced
        by the last good advice for the same vehicle when one exists.
        Raises :class:`KeyError` for an unknown id.
        """
        snapshot = self._snapshot_for(vehicle_id)
        advice = self._advisory.advise(snapshot, lang)

        with self._lock:
            if advice.degraded:
                cached = self._advice_cache.get(snapshot.id)
                if cached is not None:
                    log.info("Serving cached advice for %s", snapshot.id)
                    return cached.model_copy(deep=True)
                return advice
            self._advice_cache[snapshot.id] = advice
        return advice

    def request_location_insight(
        self, vehicle_id: str, lang: Language = Language.EN,
    ) -> LocationInsight:
        """Describe the surroundings of one vehicle's current position.

        Same threading rules as :meth:`request_advice`; not cached.
        Raises :class:`KeyError` for an unknown id.
        """
        snapshot = self._snapshot_for(vehicle_id)
        return self._advisory.location_context(snapshot.lat, snapshot.lng, lang)

    def _snapshot_for(self, vehicle_id: str) -> VehicleTelemetry:
        key = vehicle_id.upper()
        with self._lock:
            for vehicle in self._vehicles:
                if vehicle.id == key:
                    return vehicle
        raise KeyError(vehicle_id)

    # ── Background loop ───────────────────────────────────────────────────────

    def _loop(self) -> None:
        while self._running:
            t0 = time.perf_counter()
            if not self._paused:
                try:
                    self.step()
                except Exception:
                    log.exception("SimBridge tick error")
            time.sleep(max(0.0, self._tick_interval_s - (time.perf_counter() - t0)))

    # ── tick ──────────────────────────────────────────────────────────────────

    def step(self) -> List[VehicleTelemetry]:
        """Run exactly one tick and publish it; returns the new snapshots."""
        with self._lock:
            # 1. Advance the fleet.
            vehicles = self._engine.tick(self._vehicles)

            # 2. Publish the serialized fleet for in-process consumers.
            self._feed.publish(
                topic=FEED_TOPIC_TELEMETRY,
                sender="sim_bridge",
                payload={
                    "tick": self._engine.tick_count,
                    "vehicles": [v.as_dict() for v in vehicles],
                },
            )

            # 3. Trend point for the analytics chart.
            self._trend.record(_time_label(), vehicles, self._incidents)

            # 4. Swap; readers see either the old or the new fleet.
            self._vehicles = vehicles
        return vehicles
