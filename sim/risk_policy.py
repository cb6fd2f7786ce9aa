#!/usr/bin/env python3
"""
sim/risk_policy.py
==================
Tunable motion, speed, vertical-G and risk-scoring parameters for the
fleet simulation.  Every constant lives in the frozen :class:`RiskPolicy`
dataclass so that experiments can swap policies without touching code.

Also provides the stateless scoring helpers the engine composes:

* :func:`update_speed`: jitter plus intersection damping or cruise drift.
* :func:`apply_risk_rules`: score delta and factor labels for one tick.
* :func:`classify_risk`: score → :class:`~sim.telemetry.RiskLevel`.
* :func:`dedupe_factors`: first-seen-order deduplication.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from sim.geometry import near_point
from sim.telemetry import (
    FACTOR_BUMPY_ROAD,
    FACTOR_DANGEROUS_OVERTAKE,
    FACTOR_FAST_ON_BUMPY,
    FACTOR_SPEEDING,
    FACTOR_SUSPENSION_SHOCK,
    RiskLevel,
)


@dataclass(frozen=True)
class RiskPolicy:
    """Immutable bag of every tunable simulation parameter.

    Groups: motion, speed, vertical G, risk scoring, risk levels,
    population envelope.
    """

    # ── Motion ────────────────────────────────────────────────────────────
    progress_scale_kmh: float = 2000.0
    """Speed that covers a whole path in one tick; fixes the world size."""

    # ── Speed ─────────────────────────────────────────────────────────────
    speed_jitter_kmh: float = 5.0
    """Full width of the symmetric per-tick speed perturbation."""

    intersection_x: float = 50.0
    intersection_y: float = 50.0
    """Centre of the main intersection on the normalized plane."""

    intersection_radius: float = 5.0
    """Per-axis distance from the centre inside which cars slow down."""

    intersection_decel_kmh: float = 5.0
    """Speed shed per tick near the intersection."""

    cruise_accel_kmh: float = 1.0
    """Speed gained per tick elsewhere."""

    min_speed_kmh: float = 20.0
    max_speed_kmh: float = 140.0

    # ── Vertical G ────────────────────────────────────────────────────────
    baseline_g: float = 1.0
    g_jitter: float = 0.05
    """Full width of normal road micro-vibration around the baseline."""

    bump_g_min: float = 1.5
    bump_g_max: float = 3.5
    """Spike range drawn inside a bumpy zone (upper bound exclusive)."""

    shock_g_threshold: float = 1.5
    """Vertical G at or above which a reading counts as road shock."""

    # ── Risk scoring ──────────────────────────────────────────────────────
    speeding_kmh: float = 120.0
    speeding_penalty: int = 2
    calm_decay: int = 1
    calm_floor: int = 10
    """Calm driving decays the score toward this floor, never below it."""

    bumpy_fast_kmh: float = 80.0
    bumpy_fast_penalty: int = 5

    overtake_probability: float = 0.005
    """Per-tick chance of the random dangerous-overtake spike."""

    overtake_penalty: int = 10
    score_min: int = 0
    score_max: int = 100

    # ── Risk levels (strictly greater than) ───────────────────────────────
    critical_above: int = 90
    high_above: int = 75
    moderate_above: int = 50

    # ── Population envelope ───────────────────────────────────────────────
    initial_speed_min_kmh: float = 60.0
    initial_speed_span_kmh: float = 60.0
    initial_risk_span: int = 30


DEFAULT_POLICY = RiskPolicy()


def round_half_up(value: float) -> int:
    """Round to the nearest integer; halves round up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def near_intersection(x: float, y: float, policy: RiskPolicy = DEFAULT_POLICY) -> bool:
    return near_point(
        x, y, policy.intersection_x, policy.intersection_y, policy.intersection_radius,
    )


def update_speed(
    speed: float,
    noise: float,
    at_intersection: bool,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> int:
    """Next integer speed in km/h.

    Parameters
    ----------
    speed : float
        Previous speed.
    noise : float
        Uniform draw in ``[-0.5, 0.5)``, scaled by ``speed_jitter_kmh``.
    at_intersection : bool
        Whether the new position is near the central intersection.
    """
    new_speed = speed + noise * policy.speed_jitter_kmh
    if at_intersection:
        new_speed = max(policy.min_speed_kmh, new_speed - policy.intersection_decel_kmh)
    else:
        new_speed = min(policy.max_speed_kmh, new_speed + policy.cruise_accel_kmh)
    return int(clamp(round_half_up(new_speed), policy.min_speed_kmh, policy.max_speed_kmh))


def dedupe_factors(factors: Iterable[str]) -> Tuple[str, ...]:
    """Drop repeated labels, keeping the first occurrence's position."""
    return tuple(dict.fromkeys(factors))


def apply_risk_rules(
    score: int,
    speed: float,
    in_bumpy_zone: bool,
    overtake: bool,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> Tuple[int, Tuple[str, ...]]:
    """Apply one tick of risk rules to the previous *score*.

    Returns ``(new_score, factors)`` with the score clamped to
    ``[score_min, score_max]`` and factors deduplicated.
    """
    factors: List[str] = []

    if speed > policy.speeding_kmh:
        score += policy.speeding_penalty
        factors.append(FACTOR_SPEEDING)
    else:
        score = max(policy.calm_floor, score - policy.calm_decay)

    if in_bumpy_zone:
        factors.append(FACTOR_BUMPY_ROAD)
        factors.append(FACTOR_SUSPENSION_SHOCK)
        if speed > policy.bumpy_fast_kmh:
            score += policy.bumpy_fast_penalty
            factors.append(FACTOR_FAST_ON_BUMPY)

    if overtake:
        score += policy.overtake_penalty
        factors.append(FACTOR_DANGEROUS_OVERTAKE)

    score = int(clamp(score, policy.score_min, policy.score_max))
    return score, dedupe_factors(factors)


def classify_risk(score: float, policy: RiskPolicy = DEFAULT_POLICY) -> RiskLevel:
    """Map a score to its level; thresholds are exclusive lower bounds."""
    if score > policy.critical_above:
        return RiskLevel.CRITICAL
    if score > policy.high_above:
        return RiskLevel.HIGH
    if score > policy.moderate_above:
        return RiskLevel.MODERATE
    return RiskLevel.LOW
