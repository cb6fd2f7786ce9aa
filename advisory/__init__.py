"""
advisory — Risk-advisory client
===============================

Turns a vehicle telemetry snapshot into a short summary and a list of
recommendations by calling an external generative-AI service.  The
service is optional: without an API key the client answers with a fixed
demo analysis, and any failure degrades to a placeholder instead of
raising.

Modules
-------
schemas
    :class:`RiskAdvice`, :class:`LocationInsight`, :class:`AdviceRequest`,
    :class:`Language`.
client
    :class:`AdvisoryClient` and :func:`build_prompt`.
"""

from .schemas import AdviceRequest, Language, LocationInsight, LocationSource, RiskAdvice
from .client import AdvisoryClient, build_prompt

__all__ = [
    "AdviceRequest",
    "AdvisoryClient",
    "Language",
    "LocationInsight",
    "LocationSource",
    "RiskAdvice",
    "build_prompt",
]
