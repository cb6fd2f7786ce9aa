#!/usr/bin/env python3

import os
import time
import logging

# Logging
from logging_setup import setup_logging
# Defaults
from config import DEFAULT_RANDOM_SEED, DEFAULT_TICK_INTERVAL_S, DEFAULT_VEHICLE_COUNT
# Simulation
from sim.sim_bridge import SimBridge


def _env_int(name, default):
    raw = os.environ.get(name)
    return int(raw) if raw not in (None, "") else default


def _env_float(name, default):
    raw = os.environ.get(name)
    return float(raw) if raw not in (None, "") else default


def main():
    level_name = os.environ.get("NABEH_LOG_LEVEL", "INFO").upper()
    setup_logging(getattr(logging, level_name, logging.INFO))
    log = logging.getLogger("main")
    log.info("Starting fleet telemetry loop...")

    vehicle_count = _env_int("NABEH_VEHICLES", DEFAULT_VEHICLE_COUNT)
    tick_s = _env_float("NABEH_TICK_S", DEFAULT_TICK_INTERVAL_S)
    seed = _env_int("NABEH_SEED", DEFAULT_RANDOM_SEED)

    # Ticks are driven from this loop, not the bridge thread
    bridge = SimBridge(
        tick_interval_s=tick_s,
        vehicle_count=vehicle_count,
        random_seed=seed,
    )

    try:
        while True:
            t0 = time.perf_counter()

            # 1. Advance the fleet and publish the snapshot
            bridge.step()

            # 2. Log dashboard counters
            summary = bridge.get_summary()
            log.info(
                "tick=%d vehicles=%d avg_risk=%d high_risk=%d shock=%d",
                bridge.tick_count,
                summary["vehicle_count"],
                summary["avg_risk"],
                summary["high_risk_count"],
                summary["shock_count"],
            )

            # 3. Surface anything above the alert threshold
            for alert in bridge.get_alerts():
                log.info(
                    "ALERT %s (%s) risk=%d level=%s factors=%s",
                    alert["id"], alert["plateNumber"], alert["riskScore"],
                    alert["riskLevel"], ", ".join(alert["factors"]) or "-",
                )

            time.sleep(max(0.0, tick_s - (time.perf_counter() - t0)))

    except KeyboardInterrupt:
        log.info("Shutting down...")
        report = bridge.export_report()
        log.info("Risk report written to %s", report)

if __name__ == "__main__":
    main()
