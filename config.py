#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf; it never imports from
other project packages.
"""

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_VEHICLE_COUNT: int = 12
DEFAULT_TICK_INTERVAL_S: float = 1.5
DEFAULT_RANDOM_SEED = None

# ── Telemetry feed defaults ──────────────────────────────────────────────────
FEED_TOPIC_TELEMETRY: str = "fleet.telemetry"
FEED_MAX_BACKLOG: int = 50

# ── Analytics ────────────────────────────────────────────────────────────────
TREND_MAX_POINTS: int = 240
ALERT_RISK_THRESHOLD: int = 50
REPORT_DIR: str = "reports"

# ── Risk advisory (generative AI) ────────────────────────────────────────────
ADVISORY_MODEL: str = "gemini-2.5-flash"
ADVISORY_ENDPOINT: str = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
)
ADVISORY_API_KEY_ENV: str = "GEMINI_API_KEY"
ADVISORY_TIMEOUT_S: float = 8.0

# ── Optional REST API ────────────────────────────────────────────────────────
API_HOST: str = "0.0.0.0"
API_PORT: int = 8000

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "nabeh.log"
ENGINE_DEBUG_LOG_FILE: str = "engine_debug.log"
