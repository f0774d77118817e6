"""MongoDB document schemas for Cadence entities."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, TypeAdapter
from pydantic_mongo import PydanticObjectId

from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.timeline.model import TimelineModel
from cadence.timeline.schemas import Scene

_scene_list_adapter = TypeAdapter(list[Scene])


class ProjectDocument(BaseModel):
    """A project: one music track, its analysis and its scene timeline."""

    id: PydanticObjectId | None = Field(default=None, alias="_id")

    name: str
    description: str = ""

    # Audio
    audio_filename: str | None = None
    audio_duration_seconds: float | None = None

    # Stored as JSON so the documents stay flat
    analysis_json: str | None = None
    scenes_json: str = "[]"
    scene_count: int = 0

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    class Config:
        populate_by_name = True

    def load_analysis(self) -> AudioAnalysisResult | None:
        """Deserialize the stored analysis, if any."""
        if self.analysis_json is None:
            return None
        return AudioAnalysisResult.model_validate_json(self.analysis_json)

    def load_timeline(self) -> TimelineModel:
        """Rebuild the timeline from the stored scenes and analysis."""
        scenes = _scene_list_adapter.validate_json(self.scenes_json)
        return TimelineModel(scenes=scenes, analysis=self.load_analysis())

    def store_timeline(self, timeline: TimelineModel) -> None:
        """Write a timeline's scenes (and analysis) into the document."""
        self.scenes_json = _scene_list_adapter.dump_json(timeline.scenes).decode()
        self.scene_count = len(timeline.scenes)
        if timeline.analysis is not None:
            self.store_analysis(timeline.analysis)
        self.updated_at = datetime.now(UTC)

    def store_analysis(self, analysis: AudioAnalysisResult) -> None:
        """Write an analysis into the document."""
        self.analysis_json = analysis.model_dump_json()
        self.audio_duration_seconds = analysis.duration_seconds
        self.updated_at = datetime.now(UTC)
