"""WebSocket message schemas."""

from enum import StrEnum, auto

from pydantic import Field

from cadence.common.base_cadence_model import BaseCadenceModel


class AnalysisStage(StrEnum):
    """Stages of an audio analysis run."""

    DECODING = auto()
    ANALYZING = auto()
    COMPLETED = auto()
    CANCELLED = auto()
    FAILED = auto()


class ProgressMessage(BaseCadenceModel):
    """WebSocket message for progress updates."""

    project_id: str
    generation: int = 0
    stage: AnalysisStage
    progress_percent: float = Field(ge=0, le=100)
    message: str = ""
