"""
advisory/schemas.py
===================
Pydantic models exchanged with the risk-advisory service and the REST API.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Language(str, Enum):
    EN = "en"
    AR = "ar"


class RiskAdvice(BaseModel):
    """Human-readable analysis of one vehicle's risk snapshot."""
    summary: str
    recommendations: List[str] = Field(default_factory=list)
    degraded: bool = False


class AdviceRequest(BaseModel):
    """Body accepted by ``POST /vehicles/{id}/advice``."""
    lang: Language = Language.EN


class LocationSource(BaseModel):
    """One map/web reference backing a location insight."""
    title: str
    uri: str


class LocationInsight(BaseModel):
    """Short description of the surroundings of a coordinate."""
    text: str
    sources: List[LocationSource] = Field(default_factory=list)
    degraded: bool = False
