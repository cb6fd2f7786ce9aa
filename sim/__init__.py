"""
sim — Simulation core
=====================

Modules
-------
geometry
    Plane/waypoint interpolation and lat/lng mapping helpers.
network
    :class:`RoadSegment` polylines and the seeded :class:`RoadNetwork`.
zones
    :class:`HazardZone` rectangles and point-in-zone lookups.
telemetry
    :class:`VehicleTelemetry` snapshot, risk levels and factor names.
risk_policy
    :class:`RiskPolicy` tunable constants and scoring helpers.
motion
    :class:`MotionStore` per-vehicle path position.
incidents
    :class:`Incident` records and the seeded history.
engine
    :class:`TelemetryEngine` population and per-tick update.
analytics
    Fleet summaries, alerts, risk trend and CSV reports.
sim_bridge
    :class:`SimBridge` background-thread orchestrator.
"""
