"""API schemas for requests and responses."""

from cadence.api.schemas.requests import (
    CreateProjectRequest,
    MediaResultRequest,
    RenderRequest,
    ReorderScenesRequest,
    ReplaceScenesRequest,
    ResizeSceneRequest,
    SplitSceneRequest,
    UpdateSceneRequest,
)
from cadence.api.schemas.responses import (
    AnalysisResponse,
    EditResponse,
    ProjectResponse,
    RenderResponse,
    TimelineResponse,
)
from cadence.api.schemas.websocket import AnalysisStage, ProgressMessage

__all__ = [
    "CreateProjectRequest",
    "MediaResultRequest",
    "RenderRequest",
    "ReorderScenesRequest",
    "ReplaceScenesRequest",
    "ResizeSceneRequest",
    "SplitSceneRequest",
    "UpdateSceneRequest",
    "AnalysisResponse",
    "EditResponse",
    "ProjectResponse",
    "RenderResponse",
    "TimelineResponse",
    "AnalysisStage",
    "ProgressMessage",
]
