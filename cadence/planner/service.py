"""Planner service: seeds a timeline from the external scene planner."""

import logging

from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.planner.context import build_planner_context
from cadence.planner.interfaces import ScenePlanner
from cadence.planner.schemas import ScenePlan, SyncMode
from cadence.timeline.model import TimelineModel

logger = logging.getLogger(__name__)

MAX_PLANNED_SCENES = 10


class PlannerService:
    """Turns planner output into a normalized timeline."""

    def __init__(self, planner: ScenePlanner) -> None:
        """Initialize the service.

        Args:
            planner: The external planner to consult.
        """
        self.planner = planner

    async def plan_timeline(
        self,
        analysis: AudioAnalysisResult,
        sync_mode: SyncMode = SyncMode.MIXED,
    ) -> TimelineModel:
        """Ask the planner for scenes and build a timeline from them."""
        context = build_planner_context(analysis, sync_mode)
        logger.info(
            "Requesting scene plan: duration=%.1fs, %d segments, sync=%s",
            context.duration_seconds,
            len(context.segments),
            sync_mode,
        )
        plan = await self.planner.plan(context)
        return seed_timeline(plan, analysis)


def seed_timeline(plan: ScenePlan, analysis: AudioAnalysisResult | None = None) -> TimelineModel:
    """Build a timeline from a plan, keeping at most 10 scenes."""
    if len(plan.scenes) > MAX_PLANNED_SCENES:
        logger.warning(
            "Planner returned %d scenes; keeping the first %d",
            len(plan.scenes),
            MAX_PLANNED_SCENES,
        )
    return TimelineModel.from_raw_scenes(plan.scenes[:MAX_PLANNED_SCENES], analysis=analysis)
