#!/usr/bin/env python3
"""
logging_setup.py
================
Two log files are written to the working directory:

``nabeh.log``
    Everything the console shows at the configured level: bridge
    lifecycle, dangerous-overtake flags, advisory failures, API and
    headless-loop summaries.  Rotates at 1 MB, 2 backups.
``engine_debug.log``
    The ``engine`` logger only, always at DEBUG: the fleet dump written
    every tenth tick (road, progress, position, speed, risk, G-force and
    factors per vehicle).  Rotates at 5 MB, 2 backups.  These records do
    not reach the console unless *level* is DEBUG.

Call :func:`setup_logging` once from ``main.py`` or the API entry point,
before the :class:`~sim.sim_bridge.SimBridge` thread starts.
"""

import logging
from logging.handlers import RotatingFileHandler

from config import ENGINE_DEBUG_LOG_FILE, LOG_FILE


def setup_logging(level: int = logging.INFO) -> None:
    """Apply a unified log format to both console and file output.

    Parameters
    ----------
    level : int
        Minimum severity level (e.g. ``logging.DEBUG``, ``logging.INFO``).
    """
    root = logging.getLogger()
    root.setLevel(level)

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)

    fh = RotatingFileHandler(LOG_FILE, maxBytes=1_000_000, backupCount=2)
    fh.setLevel(level)
    fh.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(ch)
    root.addHandler(fh)

    # ── Dedicated debug file for the per-tick engine dumps ────────────
    engine_logger = logging.getLogger("engine")
    engine_logger.setLevel(logging.DEBUG)
    engine_logger.handlers.clear()
    dfh = RotatingFileHandler(
        ENGINE_DEBUG_LOG_FILE, maxBytes=5_000_000, backupCount=2
    )
    dfh.setLevel(logging.DEBUG)
    dfh.setFormatter(fmt)
    engine_logger.addHandler(dfh)
