"""
server — Optional REST surface
==============================

Modules
-------
api
    :func:`create_app` FastAPI factory over a :class:`~sim.sim_bridge.SimBridge`.
"""
