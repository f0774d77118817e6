"""Collaborators the timeline depends on but does not implement."""

from typing import Protocol

from cadence.planner.schemas import PlannerAudioContext, ScenePlan
from cadence.timeline.schemas import Scene


class ScenePlanner(Protocol):
    """Proposes scenes for a track from its audio context."""

    async def plan(self, context: PlannerAudioContext) -> ScenePlan: ...


class MediaGenerator(Protocol):
    """Renders the visual for one scene.

    Returns an opaque media handle, or None when nothing was produced.
    """

    async def generate(self, scene: Scene) -> str | None: ...
