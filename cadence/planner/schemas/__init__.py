"""Planner schemas."""

from cadence.planner.schemas.plan import PlannerAudioContext, ScenePlan, SyncMode

__all__ = [
    "PlannerAudioContext",
    "ScenePlan",
    "SyncMode",
]
