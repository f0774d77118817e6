"""TimelineModel: the ordered scene sequence and its editing operations."""

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import Field, ValidationError

from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.schemas import (
    EditOutcome,
    RawScene,
    Scene,
    SceneEdge,
    SceneStatus,
    TimeRange,
    TransitionKind,
)
from cadence.timeline.timestamps import (
    format_time_range,
    is_valid_range,
    parse_time_range,
)

logger = logging.getLogger(__name__)

MIN_SCENE_DURATION_SECONDS = 1.0
SPLIT_GUARD_SECONDS = 0.5
SNAP_THRESHOLD_SECONDS = 0.2
DEFAULT_SLOT_SECONDS = 8.0
DEFAULT_TIMELINE_SECONDS = 30.0
NO_MEDIA_MESSAGE = "No video returned"

EDITABLE_SCENE_FIELDS = frozenset(
    {"visual_description", "audio_note", "transition_kind", "script", "voiceover_ref"}
)


class TimelineModel(BaseCadenceModel):
    """Ordered scenes plus the audio analysis they are edited against.

    The model is immutable. Every edit returns an ``EditResult`` holding the
    resulting timeline and whether the request was honored, clamped, snapped
    or rejected; invalid requests never raise and never produce an invalid
    scene.
    """

    scenes: list[Scene] = Field(default_factory=list)
    analysis: AudioAnalysisResult | None = None

    # -- construction -----------------------------------------------------

    @staticmethod
    def normalize(raw_scenes: Sequence[RawScene | Mapping[str, Any]]) -> list[Scene]:
        """Turn planner/wire descriptors into valid scenes.

        Missing or unusable timestamps fall back to consecutive 8 second
        slots by position. Missing status is derived from media presence.
        """
        return [
            _normalize_scene(
                raw if isinstance(raw, RawScene) else RawScene.model_validate(raw),
                index,
            )
            for index, raw in enumerate(raw_scenes)
        ]

    @classmethod
    def from_raw_scenes(
        cls,
        raw_scenes: Sequence[RawScene | Mapping[str, Any]],
        analysis: AudioAnalysisResult | None = None,
    ) -> "TimelineModel":
        """Build a timeline from raw descriptors."""
        return cls(scenes=cls.normalize(raw_scenes), analysis=analysis)

    def to_raw_scenes(self) -> list[RawScene]:
        """Serialize scenes to the wire descriptor format."""
        return [
            RawScene(
                timestamp=format_time_range(scene.time_range),
                visual=scene.visual_description,
                audio=scene.audio_note,
                transition=str(scene.transition_kind),
                video_url=scene.generated_media_ref,
                generated=scene.has_media,
                status=str(scene.status),
                script=scene.script,
                voiceover_url=scene.voiceover_ref,
                error=scene.error_message,
            )
            for scene in self.scenes
        ]

    def with_analysis(self, analysis: AudioAnalysisResult | None) -> "TimelineModel":
        """Return a copy bound to a new audio analysis."""
        return TimelineModel(scenes=self.scenes, analysis=analysis)

    # -- queries ------------------------------------------------------------

    @property
    def total_duration_seconds(self) -> float:
        """Duration covered by the scenes, else the audio, else a default."""
        if self.scenes:
            return max(scene.time_range.end_seconds for scene in self.scenes)
        if self.analysis is not None:
            return self.analysis.duration_seconds
        return DEFAULT_TIMELINE_SECONDS

    @property
    def is_chronological(self) -> bool:
        """Return True if scene order matches ascending start time."""
        starts = [scene.time_range.start_seconds for scene in self.scenes]
        return all(a <= b for a, b in zip(starts, starts[1:]))

    def scene_at(self, time_seconds: float) -> int | None:
        """Return the index of the first scene covering ``time_seconds``."""
        for index, scene in enumerate(self.scenes):
            if scene.time_range.contains(time_seconds):
                return index
        return None

    def chronological(self) -> "TimelineModel":
        """Return a copy with scenes sorted by start time."""
        ordered = sorted(self.scenes, key=lambda s: s.time_range.start_seconds)
        return self._with_scenes(ordered)

    # -- structural edits ---------------------------------------------------

    def split(self, index: int, at_seconds: float) -> "EditResult":
        """Split a scene in two at ``at_seconds``.

        Only honored strictly inside the scene's 0.5 second guard bands. The
        second half keeps the description and metadata but loses its media,
        since the visual has to be regenerated for the new sub-range.
        """
        if not self._has_index(index) or not math.isfinite(at_seconds):
            return self._rejected("split", index)

        scene = self.scenes[index]
        start = scene.time_range.start_seconds
        end = scene.time_range.end_seconds
        if not (start + SPLIT_GUARD_SECONDS < at_seconds < end - SPLIT_GUARD_SECONDS):
            return self._rejected("split", index)

        first = scene.model_copy(
            update={"time_range": TimeRange(start_seconds=start, end_seconds=at_seconds)}
        )
        second = scene.model_copy(
            update={
                "time_range": TimeRange(start_seconds=at_seconds, end_seconds=end),
                "generated_media_ref": None,
                "status": SceneStatus.PENDING,
                "error_message": None,
            }
        )
        scenes = [*self.scenes[:index], first, second, *self.scenes[index + 1 :]]
        logger.debug("Split scene %d at %.2fs", index, at_seconds)
        return EditResult(timeline=self._with_scenes(scenes), outcome=EditOutcome.HONORED)

    def resize(self, index: int, edge: SceneEdge | str, new_time: float) -> "EditResult":
        """Move one edge of a scene.

        The edge is clamped to the timeline bounds and so that the scene
        keeps at least 1 second. An edge landing within 0.2 seconds of the
        neighbour's matching boundary snaps exactly onto it.
        """
        if not self._has_index(index) or not math.isfinite(new_time):
            return self._rejected("resize", index)

        edge = SceneEdge(edge)
        scene = self.scenes[index]
        start = scene.time_range.start_seconds
        end = scene.time_range.end_seconds
        snapped = False

        if edge == SceneEdge.START:
            latest = end - MIN_SCENE_DURATION_SECONDS
            if latest < 0:
                return self._rejected("resize", index)
            target = min(max(0.0, new_time), latest)

            if index > 0:
                prev_end = self.scenes[index - 1].time_range.end_seconds
                if abs(target - prev_end) < SNAP_THRESHOLD_SECONDS and 0 <= prev_end <= latest:
                    snapped = target != prev_end
                    target = prev_end
            new_range = TimeRange(start_seconds=target, end_seconds=end)
        else:
            earliest = start + MIN_SCENE_DURATION_SECONDS
            target = new_time
            bound = self._duration_bound()
            if bound is not None:
                target = min(target, bound)
            target = max(target, earliest)

            if index < len(self.scenes) - 1:
                next_start = self.scenes[index + 1].time_range.start_seconds
                if abs(target - next_start) < SNAP_THRESHOLD_SECONDS and next_start >= earliest:
                    snapped = target != next_start
                    target = next_start
            new_range = TimeRange(start_seconds=start, end_seconds=target)

        if snapped and target != new_time:
            outcome = EditOutcome.SNAPPED
        elif target == new_time:
            outcome = EditOutcome.HONORED
        else:
            outcome = EditOutcome.CLAMPED

        scenes = list(self.scenes)
        scenes[index] = scene.model_copy(update={"time_range": new_range})
        return EditResult(timeline=self._with_scenes(scenes), outcome=outcome)

    def reorder(self, from_index: int, to_index: int) -> "EditResult":
        """Move a scene to a new position without touching any time range."""
        if not self._has_index(from_index) or not self._has_index(to_index):
            return self._rejected("reorder", from_index)

        scenes = list(self.scenes)
        moved = scenes.pop(from_index)
        scenes.insert(to_index, moved)
        return EditResult(timeline=self._with_scenes(scenes), outcome=EditOutcome.HONORED)

    def delete(self, index: int) -> "EditResult":
        """Remove a scene; neighbours keep their ranges."""
        if not self._has_index(index):
            return self._rejected("delete", index)

        scenes = [scene for i, scene in enumerate(self.scenes) if i != index]
        return EditResult(timeline=self._with_scenes(scenes), outcome=EditOutcome.HONORED)

    # -- field edits --------------------------------------------------------

    def update_scene(self, index: int, **changes: Any) -> "EditResult":
        """Edit descriptive fields of a scene.

        Values the scene cannot hold (e.g. a null description) reject the
        edit instead of raising.

        Raises:
            ValueError: If a field outside the editable set is given.
        """
        unknown = set(changes) - EDITABLE_SCENE_FIELDS
        if unknown:
            msg = f"Fields not editable: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        if not self._has_index(index):
            return self._rejected("update", index)

        scene = self.scenes[index]
        try:
            updated = Scene.model_validate({**scene.model_dump(), **changes})
        except ValidationError as e:
            logger.warning("Rejected update on scene %d: %d invalid field(s)", index, e.error_count())
            return EditResult(timeline=self, outcome=EditOutcome.REJECTED)
        scenes = list(self.scenes)
        scenes[index] = updated
        return EditResult(timeline=self._with_scenes(scenes), outcome=EditOutcome.HONORED)

    def mark_generating(self, index: int) -> "EditResult":
        """Flag a scene's media as being generated."""
        if not self._has_index(index):
            return self._rejected("mark_generating", index)

        scenes = list(self.scenes)
        scenes[index] = scenes[index].model_copy(
            update={"status": SceneStatus.GENERATING, "error_message": None}
        )
        return EditResult(timeline=self._with_scenes(scenes), outcome=EditOutcome.HONORED)

    def apply_media_result(
        self,
        index: int,
        media_ref: str | None,
        error: str | None = None,
    ) -> "EditResult":
        """Record the media pipeline's result for a scene.

        Args:
            index: Scene position.
            media_ref: Handle of the generated media, or None on failure.
            error: Failure description; defaults to a generic message.
        """
        if not self._has_index(index):
            return self._rejected("apply_media_result", index)

        if media_ref is not None:
            update = {
                "generated_media_ref": media_ref,
                "status": SceneStatus.SUCCESS,
                "error_message": None,
            }
        else:
            update = {"status": SceneStatus.ERROR, "error_message": error or NO_MEDIA_MESSAGE}

        scenes = list(self.scenes)
        scenes[index] = scenes[index].model_copy(update=update)
        return EditResult(timeline=self._with_scenes(scenes), outcome=EditOutcome.HONORED)

    # -- helpers ------------------------------------------------------------

    def _has_index(self, index: int) -> bool:
        return 0 <= index < len(self.scenes)

    def _duration_bound(self) -> float | None:
        if self.analysis is None:
            return None
        return self.analysis.duration_seconds

    def _with_scenes(self, scenes: list[Scene]) -> "TimelineModel":
        return TimelineModel(scenes=scenes, analysis=self.analysis)

    def _rejected(self, operation: str, index: int) -> "EditResult":
        logger.debug("Rejected %s on scene %d (%d scenes)", operation, index, len(self.scenes))
        return EditResult(timeline=self, outcome=EditOutcome.REJECTED)


class EditResult(BaseCadenceModel):
    """Result of an edit: the resulting timeline and the outcome."""

    timeline: TimelineModel
    outcome: EditOutcome

    @property
    def applied(self) -> bool:
        """Return True if the timeline was changed by the edit."""
        return self.outcome != EditOutcome.REJECTED


def _parse_transition(value: str | None) -> TransitionKind:
    """Map free-form planner transitions ("Fade In", "Cut") onto a kind."""
    if not value:
        return TransitionKind.CUT
    key = value.strip().lower()
    for kind in TransitionKind:
        if key.startswith(kind.value):
            return kind
    return TransitionKind.CUT


def _parse_status(value: str | None) -> SceneStatus | None:
    if not value:
        return None
    try:
        return SceneStatus(value.strip().lower())
    except ValueError:
        return None


def _normalize_scene(raw: RawScene, index: int) -> Scene:
    start, end = parse_time_range(raw.timestamp) if raw.timestamp else (math.nan, math.nan)

    if not is_valid_range(start, end) or end - start < MIN_SCENE_DURATION_SECONDS:
        if raw.timestamp:
            logger.warning(
                "Scene %d has unusable timestamp %r; using default slot", index, raw.timestamp
            )
        start = index * DEFAULT_SLOT_SECONDS
        end = (index + 1) * DEFAULT_SLOT_SECONDS

    media_ref = raw.video_url or None
    status = _parse_status(raw.status)
    if status is None:
        status = SceneStatus.SUCCESS if media_ref else SceneStatus.PENDING

    return Scene(
        time_range=TimeRange(start_seconds=start, end_seconds=end),
        visual_description=raw.visual or "",
        audio_note=raw.audio or "",
        transition_kind=_parse_transition(raw.transition),
        generated_media_ref=media_ref,
        voiceover_ref=raw.voiceover_url,
        status=status,
        script=raw.script,
        error_message=raw.error,
    )
