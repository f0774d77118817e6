"""Shared pytest fixtures."""

import pytest

from cadence.audio_analyzer.schemas import AudioAnalysisResult, EnergyLevel, EnergySegment
from cadence.timeline.model import TimelineModel
from tests.factories import make_scene


@pytest.fixture
def analysis() -> AudioAnalysisResult:
    """A 30 second analysis with three zones and a handful of peaks."""
    return AudioAnalysisResult(
        duration_seconds=30.0,
        energy_curve=[0.2] * 100 + [0.6] * 100 + [1.0] * 100,
        segments=[
            EnergySegment(start_seconds=0.0, end_seconds=10.0, energy_level=EnergyLevel.LOW),
            EnergySegment(start_seconds=10.0, end_seconds=20.0, energy_level=EnergyLevel.BUILD),
            EnergySegment(start_seconds=20.0, end_seconds=30.0, energy_level=EnergyLevel.HIGH),
        ],
        primary_peaks=[1.0, 5.0, 21.0],
        secondary_peaks=[2.5, 22.5],
    )


@pytest.fixture
def three_scenes() -> TimelineModel:
    """Scenes [0,8), [8,16), [16,24) without analysis."""
    return TimelineModel(
        scenes=[
            make_scene(0.0, 8.0, visual_description="intro"),
            make_scene(8.0, 16.0, visual_description="verse"),
            make_scene(16.0, 24.0, visual_description="chorus"),
        ]
    )
