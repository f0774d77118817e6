"""Scene schemas for the timeline."""

import math
from enum import StrEnum, auto

from pydantic import Field, model_validator

from cadence.common.base_cadence_model import BaseCadenceModel


class TransitionKind(StrEnum):
    """Transition into a scene."""

    CUT = auto()
    FADE = auto()
    DISSOLVE = auto()
    WIPE = auto()


class SceneStatus(StrEnum):
    """Generation status of a scene's media."""

    PENDING = auto()
    GENERATING = auto()
    SUCCESS = auto()
    ERROR = auto()


class SceneEdge(StrEnum):
    """Edge of a scene's time range."""

    START = auto()
    END = auto()


class TimeRange(BaseCadenceModel):
    """A half-open time range in seconds."""

    start_seconds: float
    end_seconds: float

    @model_validator(mode="after")
    def _check_bounds(self) -> "TimeRange":
        if not (math.isfinite(self.start_seconds) and math.isfinite(self.end_seconds)):
            msg = "Time range bounds must be finite"
            raise ValueError(msg)
        if self.start_seconds < 0:
            msg = f"Time range cannot start before 0 (got {self.start_seconds})"
            raise ValueError(msg)
        if self.end_seconds <= self.start_seconds:
            msg = f"Time range end {self.end_seconds} must be after start {self.start_seconds}"
            raise ValueError(msg)
        return self

    @property
    def duration_seconds(self) -> float:
        """Return the span of the range."""
        return self.end_seconds - self.start_seconds

    def contains(self, time_seconds: float) -> bool:
        """Return True if ``start <= time < end``."""
        return self.start_seconds <= time_seconds < self.end_seconds


class Scene(BaseCadenceModel):
    """A single video scene placed on the audio timeline."""

    time_range: TimeRange
    visual_description: str = ""
    audio_note: str = ""
    transition_kind: TransitionKind = TransitionKind.CUT

    # Opaque handles owned by the media pipeline; only presence is meaningful
    generated_media_ref: str | None = None
    voiceover_ref: str | None = None

    status: SceneStatus = SceneStatus.PENDING
    script: str | None = None
    error_message: str | None = None

    @property
    def has_media(self) -> bool:
        """Return True if rendered media is attached."""
        return self.generated_media_ref is not None


class RawScene(BaseCadenceModel):
    """Scene descriptor as produced by the planner or stored on the wire.

    Every field is optional; ``TimelineModel.normalize`` fills the gaps.
    """

    timestamp: str | None = None
    visual: str | None = None
    audio: str | None = None
    transition: str | None = None
    video_url: str | None = Field(default=None, alias="videoUrl")
    generated: bool | None = None
    status: str | None = None
    script: str | None = None
    voiceover_url: str | None = Field(default=None, alias="voiceoverUrl")
    error: str | None = None
