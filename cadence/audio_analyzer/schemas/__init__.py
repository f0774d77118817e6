"""Audio analyzer schemas."""

from cadence.audio_analyzer.schemas.analysis import (
    AudioAnalysisResult,
    EnergyLevel,
    EnergySegment,
)

__all__ = [
    "AudioAnalysisResult",
    "EnergyLevel",
    "EnergySegment",
]
