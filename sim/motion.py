"""
sim/motion.py
=============
Per-vehicle motion state and the store that owns it.

:class:`MotionStore` is the only cross-tick mutable state in the
simulation.  Every :class:`~sim.engine.TelemetryEngine` owns its own
store, so independent simulations (or tests) never share entries.
The store is not thread-safe; callers serialize ticks.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator

from sim.geometry import progress_delta


@dataclass(frozen=True)
class MotionState:
    """Where a vehicle is along its assigned road.

    Attributes
    ----------
    path_index : int
        Index into the :class:`~sim.network.RoadNetwork`.
    progress : float
        Fraction of the road covered, in ``[0, 1]``.
    direction : int
        ``+1`` or ``-1``.
    """

    path_index: int
    progress: float
    direction: int = 1


def advance(state: MotionState, speed_kmh: float, scale_kmh: float) -> MotionState:
    """Move *state* forward by one tick at *speed_kmh*.

    Progress wraps rather than bounces: passing the end restarts at 0,
    passing the start restarts at 1.  Direction is never flipped.
    """
    progress = state.progress + progress_delta(speed_kmh, scale_kmh) * state.direction
    if progress >= 1.0:
        progress = 0.0
    elif progress <= 0.0:
        progress = 1.0
    return replace(state, progress=progress)


class MotionStore:
    """Mapping of vehicle id → :class:`MotionState`."""

    def __init__(self) -> None:
        self._states: Dict[str, MotionState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, vehicle_id: object) -> bool:
        return vehicle_id in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(self._states)

    def assign(
        self,
        vehicle_id: str,
        path_index: int,
        progress: float,
        direction: int = 1,
    ) -> MotionState:
        state = MotionState(path_index=path_index, progress=progress, direction=direction)
        self._states[vehicle_id] = state
        return state

    def get(self, vehicle_id: str) -> MotionState:
        """Raises :class:`KeyError` for an unknown vehicle."""
        return self._states[vehicle_id]

    def advance(self, vehicle_id: str, speed_kmh: float, scale_kmh: float) -> MotionState:
        """Advance and persist one vehicle's state; returns the new state."""
        new_state = advance(self._states[vehicle_id], speed_kmh, scale_kmh)
        self._states[vehicle_id] = new_state
        return new_state

    def clear(self) -> None:
        self._states.clear()

    def snapshot(self) -> Dict[str, MotionState]:
        """Copy of every entry."""
        return dict(self._states)
