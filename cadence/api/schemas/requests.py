"""API request schemas."""

from pydantic import Field

from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.schemas import RawScene, SceneEdge, TransitionKind


class CreateProjectRequest(BaseCadenceModel):
    """Request to create a new project."""

    name: str = Field(min_length=1, max_length=100)
    description: str = ""


class ReplaceScenesRequest(BaseCadenceModel):
    """Replace a project's scenes with raw planner/wire descriptors."""

    scenes: list[RawScene]


class SplitSceneRequest(BaseCadenceModel):
    at_seconds: float


class ResizeSceneRequest(BaseCadenceModel):
    edge: SceneEdge
    new_time_seconds: float


class ReorderScenesRequest(BaseCadenceModel):
    from_index: int
    to_index: int


class UpdateSceneRequest(BaseCadenceModel):
    """Descriptive fields to change; omitted fields are left alone."""

    visual_description: str | None = None
    audio_note: str | None = None
    transition_kind: TransitionKind | None = None
    script: str | None = None
    voiceover_ref: str | None = None


class MediaResultRequest(BaseCadenceModel):
    """Result reported by the media pipeline for one scene."""

    media_ref: str | None = None
    error: str | None = None


class RenderRequest(BaseCadenceModel):
    """Canvas size and view for a render."""

    width_px: float = Field(gt=0)
    height_px: float = Field(gt=0)
    zoom: float = 1.0
    current_time: float = 0.0
