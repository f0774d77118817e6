"""Tests for OpenTimelineIO export."""

import opentimelineio as otio
import pytest

from cadence.timeline.model import TimelineModel
from cadence.timeline.schemas import TransitionKind
from cadence.timeline_exporter.service import TimelineExporterService
from tests.factories import make_scene


@pytest.fixture
def exporter():
    return TimelineExporterService(frame_rate=30.0)


@pytest.fixture
def messy_timeline():
    """Out of order, with a hole, a hidden scene and an overlap."""
    return TimelineModel(
        scenes=[
            make_scene(10.0, 16.0, visual_description="hole before me"),
            make_scene(0.0, 8.0, generated_media_ref="https://cdn/s0.mp4"),
            make_scene(14.0, 20.0, transition_kind=TransitionKind.FADE),
            make_scene(1.0, 5.0),
        ]
    )


def test_video_track_layout(exporter, messy_timeline):
    timeline = exporter.build(messy_timeline)

    (video,) = timeline.video_tracks()
    items = list(video)

    assert [type(item) for item in items] == [
        otio.schema.Clip,
        otio.schema.Gap,
        otio.schema.Clip,
        otio.schema.Clip,
    ]
    assert [item.source_range.duration.to_seconds() for item in items] == pytest.approx(
        [8.0, 2.0, 6.0, 4.0]
    )
    assert video.duration().to_seconds() == pytest.approx(20.0)


def test_clip_references_and_metadata(exporter, messy_timeline):
    (video,) = exporter.build(messy_timeline).video_tracks()
    first, _, second, third = list(video)

    assert isinstance(first.media_reference, otio.schema.ExternalReference)
    assert first.media_reference.target_url == "https://cdn/s0.mp4"
    assert isinstance(second.media_reference, otio.schema.MissingReference)
    assert first.name == "scene_2"
    assert second.metadata["cadence"]["visual_description"] == "hole before me"
    assert third.metadata["cadence"]["transition"] == "fade"
    assert third.metadata["cadence"]["status"] == "pending"


def test_music_track_uses_audio_duration(exporter, three_scenes, analysis):
    timeline = exporter.build(three_scenes.with_analysis(analysis), audio_url="file:///song.wav")

    (music,) = timeline.audio_tracks()
    assert music.duration().to_seconds() == pytest.approx(30.0)
    assert list(music)[0].media_reference.target_url == "file:///song.wav"


def test_no_music_track_without_url(exporter, three_scenes):
    assert exporter.build(three_scenes).audio_tracks() == []


def test_string_round_trip(exporter, three_scenes):
    content = exporter.write_to_string(three_scenes, name="Demo")

    restored = otio.adapters.read_from_string(content, "otio_json")

    assert restored.name == "Demo"
    assert len(restored.video_tracks()[0]) == 3


def test_write_to_file(exporter, three_scenes, tmp_path):
    path = exporter.write_to_file(three_scenes, tmp_path / "edit.otio")

    restored = otio.adapters.read_from_file(str(path))
    assert restored.video_tracks()[0].duration().to_seconds() == pytest.approx(24.0)


def test_frame_rate_must_be_positive():
    with pytest.raises(ValueError):
        TimelineExporterService(frame_rate=0)
