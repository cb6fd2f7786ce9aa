#!/usr/bin/env python3
"""
Tests for the risk-advisory REST client using a stubbed HTTP session.
"""

from __future__ import annotations

import json
import unittest

import requests

from advisory import AdvisoryClient, Language, LocationInsight, build_prompt
from sim.telemetry import FACTOR_SPEEDING, RiskLevel, VehicleTelemetry

_VEHICLE = VehicleTelemetry(
    id="VEH-1004",
    plate_number="4821 S N K",
    driver_name="Omar Al-Ghamdi",
    speed=131,
    x=77.0,
    y=5.0,
    lat=24.8375,
    lng=46.7925,
    heading=90.0,
    risk_score=82,
    risk_level=RiskLevel.HIGH,
    factors=(FACTOR_SPEEDING,),
    vertical_g=2.4,
)


class _Response:
    def __init__(self, payload, status: int = 200) -> None:
        self._payload = payload
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class _Session:
    def __init__(self, response=None, error: Exception = None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _gemini(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class AdvisoryClientTests(unittest.TestCase):
    def test_no_key_returns_demo_without_calling_out(self) -> None:
        session = _Session()
        client = AdvisoryClient(api_key="", session=session)
        advice = client.advise(_VEHICLE, Language.EN)

        self.assertFalse(client.configured)
        self.assertFalse(advice.degraded)
        self.assertTrue(advice.summary.startswith("Demo analysis"))
        self.assertEqual(session.calls, [])

    def test_demo_in_arabic(self) -> None:
        advice = AdvisoryClient(api_key="", session=_Session()).advise(_VEHICLE, Language.AR)
        self.assertIn("تحليل تجريبي", advice.summary)

    def test_parses_model_json(self) -> None:
        body = json.dumps({
            "summary": "High speed over a damaged surface.",
            "recommendations": ["Reduce speed", "Inspect suspension"],
        })
        session = _Session(_Response(_gemini(body)))
        client = AdvisoryClient(api_key="k-123", model="test-model", session=session)

        advice = client.advise(_VEHICLE, Language.EN)
        self.assertEqual(advice.recommendations, ["Reduce speed", "Inspect suspension"])
        self.assertFalse(advice.degraded)

        call = session.calls[0]
        self.assertIn("test-model", call["url"])
        self.assertEqual(call["headers"], {"x-goog-api-key": "k-123"})
        self.assertEqual(
            call["json"]["generationConfig"]["responseMimeType"], "application/json",
        )

    def test_transport_error_degrades(self) -> None:
        session = _Session(error=requests.ConnectionError("unreachable"))
        client = AdvisoryClient(api_key="k", session=session)
        with self.assertLogs("advisory", level="WARNING"):
            advice = client.advise(_VEHICLE, Language.EN)
        self.assertTrue(advice.degraded)

    def test_http_error_degrades(self) -> None:
        client = AdvisoryClient(api_key="k", session=_Session(_Response({}, status=503)))
        with self.assertLogs("advisory", level="WARNING"):
            self.assertTrue(client.advise(_VEHICLE, Language.AR).degraded)

    def test_malformed_payloads_degrade(self) -> None:
        payloads = [
            _gemini("not json at all"),
            _gemini(json.dumps({"recommendations": ["no summary"]})),
            _gemini("   "),
            {"candidates": []},
            {"error": "quota"},
            {"candidates": [{"content": {"parts": ["oops"]}}]},
            {"candidates": [{"content": None}]},
        ]
        for payload in payloads:
            client = AdvisoryClient(api_key="k", session=_Session(_Response(payload)))
            with self.assertLogs("advisory", level="WARNING"):
                advice = client.advise(_VEHICLE, Language.EN)
            self.assertTrue(advice.degraded, msg=payload)

    def test_prompt_mentions_snapshot(self) -> None:
        prompt = build_prompt(_VEHICLE, Language.AR)
        self.assertIn("VEH-1004", prompt)
        self.assertIn("131 km/h", prompt)
        self.assertIn("2.40G", prompt)
        self.assertIn("Speeding", prompt)
        self.assertIn("Arabic", prompt)
        self.assertIn("Status: active", prompt)


class LocationContextTests(unittest.TestCase):
    def test_no_key_returns_demo(self) -> None:
        session = _Session()
        insight = AdvisoryClient(api_key="", session=session).location_context(24.7, 46.7, Language.AR)
        self.assertIsInstance(insight, LocationInsight)
        self.assertIn("محاكاة", insight.text)
        self.assertEqual(insight.sources, [])
        self.assertEqual(session.calls, [])

    def test_text_and_grounding_sources(self) -> None:
        payload = {
            "candidates": [{
                "content": {"parts": [{"text": "Near a hospital on King Fahd Rd."}]},
                "groundingMetadata": {
                    "groundingChunks": [
                        {"web": {"title": "King Fahd Medical City", "uri": "https://example.org/kfmc"}},
                        {"maps": {"title": "Olaya St", "uri": "https://maps.example.org/olaya"}},
                        {"web": {"uri": "https://example.org/untitled"}},
                    ],
                },
            }],
        }
        session = _Session(_Response(payload))
        client = AdvisoryClient(api_key="k", session=session)

        insight = client.location_context(24.71, 46.68, Language.EN)
        self.assertFalse(insight.degraded)
        self.assertEqual(insight.text, "Near a hospital on King Fahd Rd.")
        self.assertEqual([s.title for s in insight.sources], ["King Fahd Medical City", "Olaya St"])

        body = session.calls[0]["json"]
        self.assertEqual(body["tools"], [{"googleMaps": {}}])
        self.assertEqual(
            body["toolConfig"]["retrievalConfig"]["latLng"],
            {"latitude": 24.71, "longitude": 46.68},
        )

    def test_empty_text_gets_placeholder(self) -> None:
        client = AdvisoryClient(api_key="k", session=_Session(_Response(_gemini(""))))
        insight = client.location_context(24.7, 46.7, Language.EN)
        self.assertEqual(insight.text, "No information available.")
        self.assertFalse(insight.degraded)

    def test_failures_degrade(self) -> None:
        sessions = [
            _Session(error=requests.Timeout("slow")),
            _Session(_Response({}, status=500)),
            _Session(_Response({"candidates": [{"content": {"parts": [42]}}]})),
            _Session(_Response({"candidates": [{
                "content": {"parts": [{"text": "ok"}]},
                "groundingMetadata": {"groundingChunks": ["bad"]},
            }]})),
        ]
        for session in sessions:
            client = AdvisoryClient(api_key="k", session=session)
            with self.assertLogs("advisory", level="WARNING"):
                insight = client.location_context(24.7, 46.7, Language.AR)
            self.assertTrue(insight.degraded)
            self.assertEqual(insight.text, "تعذر جلب معلومات الموقع في الوقت الحالي.")


if __name__ == "__main__":
    unittest.main()
