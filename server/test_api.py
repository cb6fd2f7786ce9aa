#!/usr/bin/env python3
"""
Tests for the REST surface over a seeded simulation bridge.
"""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from advisory import LocationInsight, LocationSource, RiskAdvice
from server.api import create_app
from sim.sim_bridge import SimBridge


class _FixedAdvisory:
    def __init__(self) -> None:
        self.langs = []

    def advise(self, vehicle, lang):
        self.langs.append(lang)
        return RiskAdvice(summary=f"{vehicle.id} looks fine", recommendations=["Keep going"])

    def location_context(self, lat, lng, lang):
        self.langs.append(lang)
        return LocationInsight(
            text="Close to King Fahd Rd.",
            sources=[LocationSource(title="King Fahd Rd", uri="https://maps.example.org/kfr")],
        )


class ApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.advisory = _FixedAdvisory()
        self.bridge = SimBridge(vehicle_count=4, random_seed=99, advisory=self.advisory)
        self.bridge.step()
        self.client = TestClient(create_app(self.bridge))

    def test_vehicles(self) -> None:
        resp = self.client.get("/vehicles")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([v["id"] for v in body], ["VEH-1000", "VEH-1001", "VEH-1002", "VEH-1003"])
        self.assertIn("riskLevel", body[0])
        self.assertEqual(set(body[0]["coordinates"]), {"x", "y"})

    def test_single_vehicle_and_404(self) -> None:
        self.assertEqual(self.client.get("/vehicles/VEH-1002").json()["id"], "VEH-1002")
        self.assertEqual(self.client.get("/vehicles/VEH-7777").status_code, 404)

    def test_advice(self) -> None:
        resp = self.client.post("/vehicles/VEH-1001/advice", json={"lang": "ar"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["summary"], "VEH-1001 looks fine")
        self.assertEqual(self.advisory.langs[-1].value, "ar")

        self.assertEqual(self.client.post("/vehicles/NOPE/advice", json={}).status_code, 404)
        self.assertEqual(
            self.client.post("/vehicles/VEH-1001/advice", json={"lang": "fr"}).status_code,
            422,
        )

    def test_dashboard_endpoints(self) -> None:
        summary = self.client.get("/summary").json()
        self.assertEqual(summary["vehicle_count"], 4)
        self.assertEqual(summary["incident_severity"], {"Minor": 1, "Major": 1, "Critical": 1})

        incidents = self.client.get("/incidents").json()
        self.assertEqual([i["id"] for i in incidents], ["INC-001", "INC-002", "INC-003"])

        trend = self.client.get("/trend").json()
        self.assertEqual(len(trend), 1)
        self.assertEqual(set(trend[0]), {"time", "avg_risk", "incidents"})

        alerts = self.client.get("/alerts").json()
        self.assertTrue(all(a["riskScore"] > 50 for a in alerts))

    def test_location(self) -> None:
        resp = self.client.post("/vehicles/VEH-1001/location", json={"lang": "ar"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["text"], "Close to King Fahd Rd.")
        self.assertEqual(body["sources"][0]["title"], "King Fahd Rd")
        self.assertFalse(body["degraded"])
        self.assertEqual(self.advisory.langs[-1].value, "ar")

        self.assertEqual(self.client.post("/vehicles/VEH-7777/location", json={}).status_code, 404)

    def test_map_layers(self) -> None:
        body = self.client.get("/map").json()
        self.assertEqual(len(body["roads"]), 8)
        self.assertEqual(len(body["zones"]), 3)
        self.assertEqual(body["roads"][1]["points"], [{"x": 50, "y": 0}, {"x": 50, "y": 100}])
        self.assertEqual(body["zones"][0]["type"], "Bumpy")


if __name__ == "__main__":
    unittest.main()
