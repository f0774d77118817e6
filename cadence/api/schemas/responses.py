"""API response schemas."""

from datetime import datetime

from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.render import DrawCommand
from cadence.timeline.schemas import EditOutcome, Scene


class ProjectResponse(BaseCadenceModel):
    """Response containing project information."""

    id: str
    name: str
    description: str
    audio_filename: str | None = None
    audio_duration_seconds: float | None = None
    scene_count: int = 0
    has_analysis: bool = False
    created_at: datetime
    updated_at: datetime


class TimelineResponse(BaseCadenceModel):
    """A project's scenes and the audio analysis they are edited against."""

    project_id: str
    scenes: list[Scene]
    total_duration_seconds: float
    is_chronological: bool
    analysis: AudioAnalysisResult | None = None


class EditResponse(BaseCadenceModel):
    """Outcome of an edit plus the resulting timeline."""

    outcome: EditOutcome
    timeline: TimelineResponse


class AnalysisResponse(BaseCadenceModel):
    """Result of an audio upload."""

    project_id: str
    generation: int
    analysis: AudioAnalysisResult


class RenderResponse(BaseCadenceModel):
    """Draw commands for one frame."""

    view_start_seconds: float
    view_end_seconds: float
    commands: list[DrawCommand]
