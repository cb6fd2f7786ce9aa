"""
advisory/client.py
==================
Risk-advisory entry point.

:meth:`AdvisoryClient.advise` accepts a
:class:`~sim.telemetry.VehicleTelemetry` snapshot, asks the Gemini
``generateContent`` REST endpoint for a JSON analysis, and returns a
validated :class:`~advisory.schemas.RiskAdvice`.

:meth:`AdvisoryClient.location_context` asks the same endpoint, with the
Google Maps grounding tool, to describe the surroundings of a coordinate
and returns a :class:`~advisory.schemas.LocationInsight` with its sources.

Neither call raises.  Without an API key the client returns fixed demo
answers; on any transport, HTTP or parsing failure it logs the error and
returns a degraded placeholder.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from config import (
    ADVISORY_API_KEY_ENV,
    ADVISORY_ENDPOINT,
    ADVISORY_MODEL,
    ADVISORY_TIMEOUT_S,
)
from sim.telemetry import VehicleTelemetry

from .schemas import Language, LocationInsight, LocationSource, RiskAdvice

log = logging.getLogger("advisory")

# Anything a malformed service reply can raise while being unpacked
_REPLY_ERRORS = (
    requests.RequestException,
    ValueError,
    KeyError,
    IndexError,
    TypeError,
    AttributeError,
)

# ── canned answers ────────────────────────────────────────────────────────────

_DEMO_ADVICE: Dict[Language, RiskAdvice] = {
    Language.EN: RiskAdvice(
        summary=(
            "Demo analysis: the driver shows an erratic pattern with sudden speed "
            "changes, which points to distraction or fatigue."
        ),
        recommendations=[
            "Send an audible alert asking the driver to slow down",
            "Suggest a short rest break to the driver",
        ],
    ),
    Language.AR: RiskAdvice(
        summary=(
            "تحليل تجريبي: يُظهر السائق نمط قيادة متذبذب مع تغيرات مفاجئة في السرعة، "
            "مما يشير إلى تشتت الانتباه أو الإجهاد."
        ),
        recommendations=[
            "إرسال تنبيه صوتي لخفض السرعة",
            "اقتراح أخذ استراحة قصيرة للسائق",
        ],
    ),
}

_FALLBACK_ADVICE: Dict[Language, RiskAdvice] = {
    Language.EN: RiskAdvice(
        summary="Live analysis is unavailable. Please review the raw telemetry.",
        recommendations=[],
        degraded=True,
    ),
    Language.AR: RiskAdvice(
        summary="تعذر إجراء التحليل الفوري. يرجى مراجعة البيانات الخام.",
        recommendations=[],
        degraded=True,
    ),
}

_DEMO_LOCATION: Dict[Language, LocationInsight] = {
    Language.EN: LocationInsight(
        text=(
            "Simulation: the location is near a busy intersection on King Fahd Rd, "
            "which raises the chance of sudden stops."
        ),
    ),
    Language.AR: LocationInsight(
        text=(
            "محاكاة: الموقع يقع بالقرب من تقاطع مزدحم على طريق الملك فهد، "
            "مما يزيد من احتمالية التوقف المفاجئ."
        ),
    ),
}

_FALLBACK_LOCATION: Dict[Language, LocationInsight] = {
    Language.EN: LocationInsight(
        text="Location details are unavailable right now.",
        degraded=True,
    ),
    Language.AR: LocationInsight(
        text="تعذر جلب معلومات الموقع في الوقت الحالي.",
        degraded=True,
    ),
}

_NO_LOCATION_INFO: Dict[Language, str] = {
    Language.EN: "No information available.",
    Language.AR: "لا تتوفر معلومات.",
}

_LOCATION_PROMPTS: Dict[Language, str] = {
    Language.EN: (
        "Briefly describe (2 sentences) the road type, typical traffic, or "
        "significant places (schools, hospitals) near this location in Riyadh."
    ),
    Language.AR: (
        "صف باختصار (جملتين) حالة الطرق، حركة المرور المعتادة، أو الأماكن الهامة "
        "(مدارس، مستشفيات) بالقرب من هذا الموقع في الرياض."
    ),
}

_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "STRING",
            "description": "A 1-2 sentence explanation of the risk.",
        },
        "recommendations": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
            "description": "List of 2 actionable steps for authorities or the driver.",
        },
    },
    "required": ["summary", "recommendations"],
}


def demo_advice(lang: Language) -> RiskAdvice:
    return _DEMO_ADVICE[Language(lang)].model_copy(deep=True)


def fallback_advice(lang: Language) -> RiskAdvice:
    return _FALLBACK_ADVICE[Language(lang)].model_copy(deep=True)


def demo_location(lang: Language) -> LocationInsight:
    return _DEMO_LOCATION[Language(lang)].model_copy(deep=True)


def fallback_location(lang: Language) -> LocationInsight:
    return _FALLBACK_LOCATION[Language(lang)].model_copy(deep=True)


def build_prompt(vehicle: VehicleTelemetry, lang: Language) -> str:
    """Prompt text describing one snapshot."""
    data = vehicle.advisory_payload()
    language_name = "English" if Language(lang) == Language.EN else "Arabic"
    factors = ", ".join(data["factors"]) or "none"
    return (
        'Analyze the following vehicle telemetry data for a driver safety system named "Nabeh".\n'
        "\n"
        f"Vehicle ID: {data['id']}\n"
        f"Speed: {data['speed']} km/h\n"
        f"Vertical G-Force: {data['verticalG']:.2f}G "
        "(Normal is ~1.0G. >1.5G indicates impact/bump)\n"
        f"Risk Score: {data['riskScore']}/100\n"
        f"Risk Factors: {factors}\n"
        f"Status: {data['status']}\n"
        "\n"
        "Provide a concise analysis output in JSON format.\n"
        "If Vertical G-Force is high (>1.5), explicitly mention potential road "
        "damage or suspension issues.\n"
        f"IMPORTANT: The output MUST be in {language_name}.\n"
    )


def _candidate_text(candidate: Dict[str, Any]) -> str:
    """Concatenated text parts of one ``candidates[i]`` entry."""
    parts = candidate["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


def _grounding_sources(candidate: Dict[str, Any]) -> List[LocationSource]:
    """Titled links from the candidate's grounding chunks, in order."""
    chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []
    sources = []
    for chunk in chunks:
        ref = chunk.get("web") or chunk.get("maps") or {}
        if ref.get("uri") and ref.get("title"):
            sources.append(LocationSource(title=ref["title"], uri=ref["uri"]))
    return sources


class AdvisoryClient:
    """Thin REST client for the generative-AI risk analysis.

    Parameters
    ----------
    api_key : str or None
        Service key; read from ``$GEMINI_API_KEY`` when *None*.  An empty
        key switches the client to demo answers.
    model : str
        Model name substituted into *endpoint*.
    endpoint : str
        URL template with a ``{model}`` placeholder.
    timeout_s : float
        Per-request timeout.
    session : requests.Session or None
        Injected HTTP session (tests pass a stub).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = ADVISORY_MODEL,
        endpoint: str = ADVISORY_ENDPOINT,
        timeout_s: float = ADVISORY_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.environ.get(ADVISORY_API_KEY_ENV, "")
        self.model = model
        self.endpoint = endpoint
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def advise(self, vehicle: VehicleTelemetry, lang: Language = Language.EN) -> RiskAdvice:
        """Analyse *vehicle*; never raises."""
        lang = Language(lang)
        if not self.configured:
            return demo_advice(lang)

        try:
            text = self._generate(build_prompt(vehicle, lang))
            return RiskAdvice.model_validate_json(text)
        except _REPLY_ERRORS as exc:
            log.warning("Risk analysis failed for %s: %s", vehicle.id, exc)
            return fallback_advice(lang)

    def location_context(
        self, lat: float, lng: float, lang: Language = Language.EN,
    ) -> LocationInsight:
        """Describe the surroundings of *(lat, lng)*; never raises."""
        lang = Language(lang)
        if not self.configured:
            return demo_location(lang)

        try:
            candidate = self._post({
                "contents": [{"role": "user", "parts": [{"text": _LOCATION_PROMPTS[lang]}]}],
                "tools": [{"googleMaps": {}}],
                "toolConfig": {
                    "retrievalConfig": {
                        "latLng": {"latitude": lat, "longitude": lng},
                    },
                },
            })
            text = _candidate_text(candidate).strip() or _NO_LOCATION_INFO[lang]
            return LocationInsight(text=text, sources=_grounding_sources(candidate))
        except _REPLY_ERRORS as exc:
            log.warning("Location context failed for (%.5f, %.5f): %s", lat, lng, exc)
            return fallback_location(lang)

    def _generate(self, prompt: str) -> str:
        """POST *prompt* and return the model's raw JSON text."""
        candidate = self._post({
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": _RESPONSE_SCHEMA,
            },
        })
        text = _candidate_text(candidate)
        if not text.strip():
            raise ValueError("Empty response")
        return text

    def _post(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Send one ``generateContent`` request; returns the first candidate."""
        response = self._session.post(
            self.endpoint.format(model=self.model),
            headers={"x-goog-api-key": self.api_key},
            json=body,
            timeout=self.timeout_s,
        )
        response.raise_for_status()
        return response.json()["candidates"][0]
