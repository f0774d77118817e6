"""Schemas exchanged with the external scene planner."""

from enum import StrEnum, auto

from pydantic import Field

from cadence.audio_analyzer.schemas import EnergySegment
from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.schemas import RawScene


class SyncMode(StrEnum):
    """How planned scene cuts should follow the audio."""

    BEAT = auto()
    ENERGY = auto()
    MIXED = auto()


class PlannerAudioContext(BaseCadenceModel):
    """Audio structure handed to the planner."""

    duration_seconds: float = Field(ge=0)
    segments: list[EnergySegment]
    primary_peaks: list[float]
    secondary_peaks: list[float]
    sync_mode: SyncMode = SyncMode.MIXED
    sync_instructions: str


class ScenePlan(BaseCadenceModel):
    """The planner's answer: a title, a description and raw scenes."""

    title: str = ""
    description: str = ""
    scenes: list[RawScene] = Field(default_factory=list)
