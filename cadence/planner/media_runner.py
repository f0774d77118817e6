"""Runs the media generator over a timeline's scenes."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from cadence.planner.interfaces import MediaGenerator
from cadence.timeline.model import TimelineModel
from cadence.timeline.schemas import SceneStatus

logger = logging.getLogger(__name__)

MEDIA_BATCH_SIZE = 3

TimelineCallback = Callable[[TimelineModel], Awaitable[None]]


class MediaRunner:
    """Generates scene media in small parallel batches.

    Each scene is marked GENERATING, then SUCCESS with the returned handle or
    ERROR with the failure message. The callback sees the timeline after
    every batch.
    """

    def __init__(self, generator: MediaGenerator, batch_size: int = MEDIA_BATCH_SIZE) -> None:
        """Initialize the runner.

        Args:
            generator: Media generator to call per scene.
            batch_size: Scenes generated concurrently.
        """
        if batch_size < 1:
            msg = f"Batch size must be at least 1, got {batch_size}"
            raise ValueError(msg)
        self.generator = generator
        self.batch_size = batch_size

    async def run(
        self,
        timeline: TimelineModel,
        on_update: TimelineCallback | None = None,
        only_missing: bool = True,
    ) -> TimelineModel:
        """Generate media for the timeline's scenes.

        Args:
            timeline: Timeline whose scenes need media.
            on_update: Awaited with the timeline after each batch.
            only_missing: Skip scenes that already have media.

        Returns:
            The timeline with every attempted scene in SUCCESS or ERROR.
        """
        targets = [
            index
            for index, scene in enumerate(timeline.scenes)
            if not (only_missing and scene.has_media and scene.status == SceneStatus.SUCCESS)
        ]
        logger.info("Generating media for %d of %d scenes", len(targets), len(timeline.scenes))

        for batch_start in range(0, len(targets), self.batch_size):
            batch = targets[batch_start : batch_start + self.batch_size]
            for index in batch:
                timeline = timeline.mark_generating(index).timeline
            if on_update is not None:
                await on_update(timeline)

            outcomes = await asyncio.gather(
                *(self._generate_one(timeline, index) for index in batch)
            )
            for index, (media_ref, error) in zip(batch, outcomes):
                timeline = timeline.apply_media_result(index, media_ref, error).timeline
            if on_update is not None:
                await on_update(timeline)

        succeeded = sum(1 for i in targets if timeline.scenes[i].status == SceneStatus.SUCCESS)
        logger.info("Media generation finished: %d/%d scenes ready", succeeded, len(targets))
        return timeline

    async def _generate_one(
        self,
        timeline: TimelineModel,
        index: int,
    ) -> tuple[str | None, str | None]:
        """Return ``(media_ref, error)`` for one scene."""
        try:
            media_ref = await self.generator.generate(timeline.scenes[index])
        except Exception as e:
            logger.warning("Media generation failed for scene %d: %s", index + 1, e)
            return None, str(e) or type(e).__name__
        if media_ref is None:
            logger.warning("Media generation returned nothing for scene %d", index + 1)
        return media_ref, None
