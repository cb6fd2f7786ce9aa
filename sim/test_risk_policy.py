#!/usr/bin/env python3
"""
Tests for speed update, risk scoring rules and level classification.
"""

from __future__ import annotations

import unittest

from sim.risk_policy import (
    RiskPolicy,
    apply_risk_rules,
    classify_risk,
    dedupe_factors,
    near_intersection,
    round_half_up,
    update_speed,
)
from sim.telemetry import (
    FACTOR_BUMPY_ROAD,
    FACTOR_DANGEROUS_OVERTAKE,
    FACTOR_FAST_ON_BUMPY,
    FACTOR_SPEEDING,
    FACTOR_SUSPENSION_SHOCK,
    RiskLevel,
)


class ClassifyTests(unittest.TestCase):
    def test_boundaries_are_exclusive(self) -> None:
        cases = {
            0: RiskLevel.LOW,
            50: RiskLevel.LOW,
            51: RiskLevel.MODERATE,
            75: RiskLevel.MODERATE,
            76: RiskLevel.HIGH,
            90: RiskLevel.HIGH,
            91: RiskLevel.CRITICAL,
            100: RiskLevel.CRITICAL,
        }
        for score, level in cases.items():
            self.assertEqual(classify_risk(score), level, msg=f"score={score}")

    def test_custom_thresholds(self) -> None:
        policy = RiskPolicy(moderate_above=20, high_above=40, critical_above=60)
        self.assertEqual(classify_risk(41, policy), RiskLevel.HIGH)


class RiskRuleTests(unittest.TestCase):
    def test_speeding_adds_penalty(self) -> None:
        score, factors = apply_risk_rules(40, 130, False, False)
        self.assertEqual(score, 42)
        self.assertEqual(factors, (FACTOR_SPEEDING,))

    def test_exactly_at_limit_is_calm(self) -> None:
        score, factors = apply_risk_rules(40, 120, False, False)
        self.assertEqual(score, 39)
        self.assertEqual(factors, ())

    def test_calm_decay_stops_at_floor(self) -> None:
        self.assertEqual(apply_risk_rules(30, 60, False, False)[0], 29)
        self.assertEqual(apply_risk_rules(11, 60, False, False)[0], 10)
        self.assertEqual(apply_risk_rules(10, 60, False, False)[0], 10)

    def test_slow_bumpy_road(self) -> None:
        score, factors = apply_risk_rules(20, 70, True, False)
        self.assertEqual(score, 19)
        self.assertEqual(factors, (FACTOR_BUMPY_ROAD, FACTOR_SUSPENSION_SHOCK))

    def test_fast_bumpy_road(self) -> None:
        score, factors = apply_risk_rules(20, 100, True, False)
        self.assertEqual(score, 24)
        self.assertEqual(
            factors,
            (FACTOR_BUMPY_ROAD, FACTOR_SUSPENSION_SHOCK, FACTOR_FAST_ON_BUMPY),
        )

    def test_penalties_stack_and_clamp(self) -> None:
        score, factors = apply_risk_rules(95, 130, True, True)
        self.assertEqual(score, 100)
        self.assertEqual(
            factors,
            (
                FACTOR_SPEEDING,
                FACTOR_BUMPY_ROAD,
                FACTOR_SUSPENSION_SHOCK,
                FACTOR_FAST_ON_BUMPY,
                FACTOR_DANGEROUS_OVERTAKE,
            ),
        )

    def test_overtake_alone(self) -> None:
        score, factors = apply_risk_rules(30, 60, False, True)
        self.assertEqual(score, 39)
        self.assertEqual(factors, (FACTOR_DANGEROUS_OVERTAKE,))

    def test_dedupe_keeps_first_position(self) -> None:
        self.assertEqual(dedupe_factors(["B", "A", "B", "C", "A"]), ("B", "A", "C"))


class SpeedTests(unittest.TestCase):
    def test_cruise_accelerates(self) -> None:
        self.assertEqual(update_speed(100, 0.0, False), 101)

    def test_intersection_decelerates(self) -> None:
        self.assertEqual(update_speed(100, 0.1, True), 96)

    def test_bounds(self) -> None:
        self.assertEqual(update_speed(139.6, 0.49, False), 140)
        self.assertEqual(update_speed(22, -0.5, True), 20)
        self.assertEqual(update_speed(20, -0.5, False), 20)

    def test_result_is_int(self) -> None:
        self.assertIsInstance(update_speed(73, 0.27, False), int)

    def test_round_half_up(self) -> None:
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(2.49), 2)
        self.assertEqual(round_half_up(-0.5), 0)

    def test_near_intersection(self) -> None:
        self.assertTrue(near_intersection(50, 50))
        self.assertTrue(near_intersection(46, 53))
        self.assertFalse(near_intersection(45, 50))


if __name__ == "__main__":
    unittest.main()
