"""Schemas for audio energy analysis."""

from enum import StrEnum, auto

from pydantic import Field, model_validator

from cadence.common.base_cadence_model import BaseCadenceModel

SEGMENT_END_TOLERANCE = 1e-6


class EnergyLevel(StrEnum):
    """Energy zone of a stretch of audio."""

    LOW = auto()
    BUILD = auto()
    HIGH = auto()


class EnergySegment(BaseCadenceModel):
    """A maximal time range sharing one energy classification."""

    start_seconds: float
    end_seconds: float
    energy_level: EnergyLevel

    @property
    def duration_seconds(self) -> float:
        """Return the length of the segment."""
        return self.end_seconds - self.start_seconds


class AudioAnalysisResult(BaseCadenceModel):
    """Result of analyzing one audio track.

    Segments are contiguous and cover ``[0, duration_seconds]`` (boundaries
    rounded to 2 decimals). Peaks are window timestamps in seconds.
    """

    duration_seconds: float = Field(ge=0)
    energy_curve: list[float]
    segments: list[EnergySegment]
    primary_peaks: list[float]
    secondary_peaks: list[float]

    @model_validator(mode="after")
    def _check_coverage(self) -> "AudioAnalysisResult":
        if any(not 0.0 <= e <= 1.0 for e in self.energy_curve):
            msg = "Energy curve values must lie in [0, 1]"
            raise ValueError(msg)
        if not self.segments:
            return self
        if self.segments[0].start_seconds != 0:
            msg = f"First segment must start at 0 (got {self.segments[0].start_seconds})"
            raise ValueError(msg)
        for current, following in zip(self.segments, self.segments[1:]):
            if current.end_seconds != following.start_seconds:
                msg = (
                    f"Segments must be contiguous: {current.end_seconds} != "
                    f"{following.start_seconds}"
                )
                raise ValueError(msg)
        expected_end = round(self.duration_seconds, 2)
        if abs(self.segments[-1].end_seconds - expected_end) > SEGMENT_END_TOLERANCE:
            msg = f"Last segment must end at {expected_end} (got {self.segments[-1].end_seconds})"
            raise ValueError(msg)
        return self
