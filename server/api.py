"""
server/api.py
=============
Optional FastAPI server that exposes the running simulation as a
read-only REST surface.

Start the server::

    python -m server.api          # → http://localhost:8000/vehicles

Endpoints return the bridge's cached snapshot; they never advance the
simulation themselves.  ``POST /vehicles/{id}/advice`` forwards one
snapshot to the risk-advisory service; ``POST /vehicles/{id}/location``
asks it about the vehicle's surroundings.  ``GET /map`` serves the static
road and hazard-zone layers.

.. note::

   This server is **not** required to run the simulation.
   It exists for external integrations and testing.
"""

import logging
from typing import Any, Dict, List

import uvicorn
from fastapi import FastAPI, HTTPException

from advisory import AdviceRequest, LocationInsight, RiskAdvice
from config import API_HOST, API_PORT
from sim.sim_bridge import SimBridge

log = logging.getLogger("api")


def create_app(bridge: SimBridge) -> FastAPI:
    """Build the application around an existing *bridge*."""
    app = FastAPI(
        title="Nabeh Fleet Telemetry API",
        description="Live vehicle telemetry, risk scores and incident history.",
        version="1.0",
    )

    @app.get("/vehicles")
    def list_vehicles() -> List[Dict[str, Any]]:
        return bridge.get_vehicles()

    @app.get("/vehicles/{vehicle_id}")
    def get_vehicle(vehicle_id: str) -> Dict[str, Any]:
        try:
            return bridge.get_vehicle(vehicle_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown vehicle {vehicle_id}")

    @app.post("/vehicles/{vehicle_id}/advice", response_model=RiskAdvice)
    def vehicle_advice(vehicle_id: str, request: AdviceRequest) -> RiskAdvice:
        try:
            return bridge.request_advice(vehicle_id, request.lang)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown vehicle {vehicle_id}")

    @app.post("/vehicles/{vehicle_id}/location", response_model=LocationInsight)
    def vehicle_location(vehicle_id: str, request: AdviceRequest) -> LocationInsight:
        try:
            return bridge.request_location_insight(vehicle_id, request.lang)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown vehicle {vehicle_id}")

    @app.get("/summary")
    def fleet_summary() -> Dict[str, Any]:
        return bridge.get_summary()

    @app.get("/alerts")
    def fleet_alerts() -> List[Dict[str, Any]]:
        return bridge.get_alerts()

    @app.get("/incidents")
    def incidents() -> List[Dict[str, Any]]:
        return bridge.get_incidents()

    @app.get("/map")
    def city_map() -> Dict[str, List[Dict[str, Any]]]:
        return bridge.get_map()

    @app.get("/trend")
    def risk_trend() -> List[Dict[str, Any]]:
        return bridge.get_trend()

    return app


# ── Standalone entry point ───────────────────────────────────────────────────

if __name__ == "__main__":
    from logging_setup import setup_logging

    setup_logging(logging.INFO)
    sim = SimBridge()
    sim.start()
    log.info("Starting Nabeh API on http://%s:%d", API_HOST, API_PORT)
    try:
        uvicorn.run(create_app(sim), host=API_HOST, port=API_PORT)
    finally:
        sim.stop()
