"""Timeline schemas."""

from cadence.timeline.schemas.edit import EditOutcome
from cadence.timeline.schemas.scene import (
    RawScene,
    Scene,
    SceneEdge,
    SceneStatus,
    TimeRange,
    TransitionKind,
)

__all__ = [
    "EditOutcome",
    "RawScene",
    "Scene",
    "SceneEdge",
    "SceneStatus",
    "TimeRange",
    "TransitionKind",
]
