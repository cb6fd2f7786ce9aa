#!/usr/bin/env python3
"""
sim/engine.py
=============
Tick-driven fleet telemetry engine.

:class:`TelemetryEngine` owns a :class:`~sim.motion.MotionStore`, a seeded
random source and the static map data.  It creates the vehicle
population and turns the previous tick's snapshots into the next ones.
Every tick is a pure map over the input list: no vehicle reads another
vehicle's new state, and the only side effect is each vehicle's own
motion-store entry.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from sim.geometry import RIYADH_BOUNDS, GeoBounds, to_lat_lng
from sim.incidents import Incident, incident_history
from sim.motion import MotionStore
from sim.network import RoadNetwork, default_network
from sim.risk_policy import (
    DEFAULT_POLICY,
    RiskPolicy,
    apply_risk_rules,
    classify_risk,
    near_intersection,
    update_speed,
)
from sim.telemetry import RiskLevel, VehicleStatus, VehicleTelemetry
from sim.zones import HAZARD_ZONES, HazardZone, RoadCondition, in_zone

log = logging.getLogger("engine")

DRIVER_NAMES = (
    "Ahmed Al-Fahd",
    "Khalid Al-Otaibi",
    "Mohammed Salem",
    "Fahd Al-Dossari",
    "Omar Al-Ghamdi",
    "Abdullah Al-Anazi",
    "Salman Al-Qahtani",
    "Faisal Al-Mutairi",
    "Saad Al-Malki",
    "Turki Al-Sheikh",
    "Yasser Al-Qahtani",
    "Badr Al-Shammari",
)

# One letter is drawn from each group: "1234 A L D"
_PLATE_LETTERS = (
    ("A", "B", "J", "D", "R", "S"),
    ("L", "M", "N", "H", "W", "Y"),
    ("D", "Z", "R", "S", "K"),
)

_ID_BASE = 1000
_DEBUG_EVERY = 10


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TelemetryEngine:
    """Fleet population and per-tick update.

    Parameters
    ----------
    seed : int or None
        Random seed for reproducibility.
    policy : RiskPolicy or None
        Tunable constants; uses defaults when *None*.
    network : RoadNetwork or None
        The road layout.  Uses :func:`~sim.network.default_network` when *None*.
    zones : iterable of HazardZone or None
        Hazard table.  Uses :data:`~sim.zones.HAZARD_ZONES` when *None*.
    bounds : GeoBounds or None
        Geographic box for ``lat``/``lng``.
    clock : callable or None
        Returns the ``last_update`` string; UTC ISO-8601 by default.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        policy: Optional[RiskPolicy] = None,
        network: Optional[RoadNetwork] = None,
        zones: Optional[Iterable[HazardZone]] = None,
        bounds: Optional[GeoBounds] = None,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self.policy = policy or DEFAULT_POLICY
        self.network = network or default_network()
        self.zones = tuple(zones) if zones is not None else HAZARD_ZONES
        self.bounds = bounds or RIYADH_BOUNDS
        self.motion = MotionStore()
        self._rng = random.Random(seed)
        self._clock = clock or _utc_now
        self._tick_count: int = 0

    @property
    def tick_count(self) -> int:
        return self._tick_count

    # ── population ────────────────────────────────────────────────────────

    def initialize_population(self, count: int) -> List[VehicleTelemetry]:
        """Create *count* vehicles and reset the motion store.

        Vehicle ``i`` is ``VEH-{1000 + i}`` on road ``i mod len(network)``.
        A non-positive *count* yields an empty fleet.
        """
        self.motion.clear()
        self._tick_count = 0
        vehicles = [self._make_vehicle(idx) for idx in range(max(0, int(count)))]
        log.info("Initialized %d vehicles on %d roads", len(vehicles), len(self.network))
        return vehicles

    def _make_vehicle(self, idx: int) -> VehicleTelemetry:
        road_index, road = self.network.segment_for(idx)
        progress = self._rng.random()
        vehicle_id = f"VEH-{_ID_BASE + idx}"
        self.motion.assign(vehicle_id, road_index, progress, direction=1)

        x, y, heading = road.position_at(progress)
        lat, lng = to_lat_lng(x, y, self.bounds)
        plate = self._random_plate()
        speed = int(math.floor(
            self.policy.initial_speed_min_kmh
            + self._rng.random() * self.policy.initial_speed_span_kmh
        ))
        risk_score = int(math.floor(self._rng.random() * self.policy.initial_risk_span))

        return VehicleTelemetry(
            id=vehicle_id,
            plate_number=plate,
            driver_name=DRIVER_NAMES[idx % len(DRIVER_NAMES)],
            speed=speed,
            x=x,
            y=y,
            lat=lat,
            lng=lng,
            heading=heading,
            risk_score=risk_score,
            risk_level=RiskLevel.LOW,
            factors=(),
            status=VehicleStatus.ACTIVE,
            vertical_g=self.policy.baseline_g,
            last_update=self._clock(),
        )

    def _random_plate(self) -> str:
        digits = self._rng.randint(1000, 9999)
        letters = [self._rng.choice(group) for group in _PLATE_LETTERS]
        return f"{digits} {' '.join(letters)}"

    # ── tick ──────────────────────────────────────────────────────────────

    def tick(self, previous: Sequence[VehicleTelemetry]) -> List[VehicleTelemetry]:
        """Advance every vehicle by one step; same order and length as *previous*.

        A vehicle id that appears more than once is advanced only for its
        first occurrence; later copies repeat that first result.
        """
        self._tick_count += 1
        done: Dict[str, VehicleTelemetry] = {}
        updated = []
        for vehicle in previous:
            if vehicle.id in done:
                log.warning("Duplicate snapshot for %s in tick %d", vehicle.id, self._tick_count)
            else:
                done[vehicle.id] = self._update_vehicle(vehicle)
            updated.append(done[vehicle.id])

        if self._tick_count % _DEBUG_EVERY == 1:
            log.debug("=== TICK %d ===", self._tick_count)
            for v in updated:
                state = self.motion.get(v.id)
                log.debug(
                    "  %s  road=%s prog=%.3f pos=(%.1f,%.1f) hdg=%.0f "
                    "spd=%d risk=%d level=%s g=%.2f factors=%s",
                    v.id, self.network[state.path_index].id, state.progress,
                    v.x, v.y, v.heading, v.speed, v.risk_score,
                    v.risk_level.value, v.vertical_g, ",".join(v.factors),
                )
        return updated

    def _update_vehicle(self, vehicle: VehicleTelemetry) -> VehicleTelemetry:
        policy = self.policy
        if vehicle.id not in self.motion:
            self._adopt(vehicle)

        # 1-2. Move along the road and project.
        state = self.motion.advance(vehicle.id, vehicle.speed, policy.progress_scale_kmh)
        road = self.network[state.path_index]
        x, y, heading = road.position_at(state.progress)
        lat, lng = to_lat_lng(x, y, self.bounds)

        # 3. Speed.
        speed = update_speed(
            vehicle.speed,
            self._rng.random() - 0.5,
            near_intersection(x, y, policy),
            policy,
        )

        # 4. Hazard zones.
        bumpy = in_zone(x, y, RoadCondition.BUMPY, self.zones)

        # 5. Vertical G; a bump replaces the baseline outright.
        vertical_g = policy.baseline_g + (self._rng.random() - 0.5) * policy.g_jitter
        if bumpy:
            vertical_g = policy.bump_g_min + (
                policy.bump_g_max - policy.bump_g_min
            ) * self._rng.random()

        # 6-7. Risk.
        overtake = self._rng.random() < policy.overtake_probability
        risk_score, factors = apply_risk_rules(
            vehicle.risk_score, speed, bumpy, overtake, policy,
        )
        if overtake:
            log.info("Dangerous overtake flagged for %s (risk=%d)", vehicle.id, risk_score)

        return replace(
            vehicle,
            speed=speed,
            x=x,
            y=y,
            lat=lat,
            lng=lng,
            heading=heading,
            risk_score=risk_score,
            risk_level=classify_risk(risk_score, policy),
            factors=factors,
            vertical_g=vertical_g,
            last_update=self._clock(),
        )

    def _adopt(self, vehicle: VehicleTelemetry) -> None:
        """Give a snapshot from elsewhere a motion entry so the tick can proceed."""
        road_index = len(self.motion) % len(self.network)
        self.motion.assign(vehicle.id, road_index, 0.0, direction=1)
        log.warning(
            "No motion state for %s; assigned to road %s at progress 0",
            vehicle.id, self.network[road_index].id,
        )

    # ── history ───────────────────────────────────────────────────────────

    def incident_history(self) -> List[Incident]:
        return incident_history()
