"""Tests for TimelineModel construction, queries and edits."""

import logging
import math

import pytest

from cadence.audio_analyzer.schemas import EnergyLevel, EnergySegment
from cadence.timeline.model import DEFAULT_TIMELINE_SECONDS, NO_MEDIA_MESSAGE, TimelineModel
from cadence.timeline.schemas import (
    EditOutcome,
    SceneEdge,
    SceneStatus,
    TimeRange,
    TransitionKind,
)
from tests.factories import make_scene


def _ranges(timeline):
    return [(s.time_range.start_seconds, s.time_range.end_seconds) for s in timeline.scenes]


class TestTimeRange:
    def test_end_must_follow_start(self):
        with pytest.raises(ValueError):
            TimeRange(start_seconds=5.0, end_seconds=5.0)

    def test_start_cannot_be_negative(self):
        with pytest.raises(ValueError):
            TimeRange(start_seconds=-1.0, end_seconds=5.0)

    def test_bounds_must_be_finite(self):
        with pytest.raises(ValueError):
            TimeRange(start_seconds=0.0, end_seconds=math.inf)

    def test_contains_is_half_open(self):
        time_range = TimeRange(start_seconds=2.0, end_seconds=4.0)
        assert time_range.contains(2.0)
        assert not time_range.contains(4.0)


class TestNormalize:
    def test_fills_defaults_from_position(self, caplog):
        raw = [
            {"timestamp": "0:00-0:08", "visual": "a", "transition": "Fade In"},
            {"visual": "b"},
            {"timestamp": "bad", "videoUrl": "https://cdn/v.mp4"},
            {"timestamp": "0:30-0:30"},
        ]

        with caplog.at_level(logging.WARNING, logger="cadence.timeline.model"):
            scenes = TimelineModel.normalize(raw)

        assert [(s.time_range.start_seconds, s.time_range.end_seconds) for s in scenes] == [
            (0.0, 8.0),
            (8.0, 16.0),
            (16.0, 24.0),
            (24.0, 32.0),
        ]
        assert scenes[0].transition_kind == TransitionKind.FADE
        assert scenes[1].transition_kind == TransitionKind.CUT
        assert scenes[0].status == SceneStatus.PENDING
        assert scenes[2].status == SceneStatus.SUCCESS
        assert scenes[2].generated_media_ref == "https://cdn/v.mp4"
        assert "unusable timestamp" in caplog.text

    def test_sub_second_span_falls_back_to_slot(self):
        scenes = TimelineModel.normalize([{"timestamp": "0:05-0:05.5"}])
        assert (scenes[0].time_range.start_seconds, scenes[0].time_range.end_seconds) == (0.0, 8.0)

    def test_explicit_status_is_kept(self):
        scenes = TimelineModel.normalize(
            [{"status": "error", "error": "quota"}, {"status": "weird"}]
        )
        assert scenes[0].status == SceneStatus.ERROR
        assert scenes[0].error_message == "quota"
        assert scenes[1].status == SceneStatus.PENDING

    def test_unknown_transition_is_cut(self):
        scenes = TimelineModel.normalize([{"transition": "Spin"}])
        assert scenes[0].transition_kind == TransitionKind.CUT

    def test_raw_round_trip(self, three_scenes):
        edited = three_scenes.apply_media_result(1, "vid://2").timeline
        edited = edited.update_scene(0, script="hello", transition_kind="dissolve").timeline

        rebuilt = TimelineModel.from_raw_scenes(edited.to_raw_scenes())

        assert rebuilt.scenes == edited.scenes


class TestQueries:
    def test_total_duration_is_latest_scene_end(self, three_scenes):
        assert three_scenes.total_duration_seconds == 24.0
        reordered = three_scenes.reorder(2, 0).timeline
        assert reordered.total_duration_seconds == 24.0

    def test_total_duration_falls_back_to_audio_then_default(self, analysis):
        short = analysis.model_copy(
            update={
                "duration_seconds": 12.0,
                "segments": [
                    EnergySegment(start_seconds=0.0, end_seconds=12.0, energy_level=EnergyLevel.LOW)
                ],
            }
        )
        assert TimelineModel(analysis=short).total_duration_seconds == 12.0
        assert TimelineModel().total_duration_seconds == DEFAULT_TIMELINE_SECONDS

    def test_scene_at_uses_half_open_ranges(self, three_scenes):
        assert three_scenes.scene_at(0.0) == 0
        assert three_scenes.scene_at(8.0) == 1
        assert three_scenes.scene_at(24.0) is None


class TestSplit:
    def test_split_in_the_middle(self):
        timeline = TimelineModel(
            scenes=[
                make_scene(
                    0.0,
                    8.0,
                    visual_description="city",
                    generated_media_ref="vid://1",
                    status=SceneStatus.SUCCESS,
                )
            ]
        )

        result = timeline.split(0, 4.0)

        assert result.outcome == EditOutcome.HONORED
        first, second = result.timeline.scenes
        assert _ranges(result.timeline) == [(0.0, 4.0), (4.0, 8.0)]
        assert first.status == SceneStatus.SUCCESS
        assert first.generated_media_ref == "vid://1"
        assert second.status == SceneStatus.PENDING
        assert second.generated_media_ref is None
        assert second.visual_description == "city"

    @pytest.mark.parametrize("at", [0.3, 0.5, 7.5, 7.9, -1.0, 9.0, math.nan])
    def test_split_inside_guard_band_is_rejected(self, at):
        timeline = TimelineModel(scenes=[make_scene(0.0, 8.0)])

        result = timeline.split(0, at)

        assert result.outcome == EditOutcome.REJECTED
        assert result.timeline == timeline

    def test_split_invalid_index_is_rejected(self, three_scenes):
        assert three_scenes.split(3, 4.0).outcome == EditOutcome.REJECTED

    def test_split_keeps_other_scenes(self, three_scenes):
        result = three_scenes.split(1, 12.0)
        assert _ranges(result.timeline) == [(0.0, 8.0), (8.0, 12.0), (12.0, 16.0), (16.0, 24.0)]


class TestResize:
    def test_start_snaps_to_previous_end(self):
        timeline = TimelineModel(scenes=[make_scene(0.0, 4.0), make_scene(5.0, 10.0)])

        result = timeline.resize(1, SceneEdge.START, 3.95)

        assert result.outcome == EditOutcome.SNAPPED
        assert result.timeline.scenes[1].time_range.start_seconds == 4.0

    def test_end_snaps_to_next_start(self, three_scenes):
        result = three_scenes.resize(0, SceneEdge.END, 7.9)

        assert result.outcome == EditOutcome.SNAPPED
        assert result.timeline.scenes[0].time_range.end_seconds == 8.0

    def test_move_outside_snap_band_is_honored(self, three_scenes):
        result = three_scenes.resize(1, "end", 14.0)

        assert result.outcome == EditOutcome.HONORED
        assert _ranges(result.timeline)[1] == (8.0, 14.0)

    def test_start_keeps_one_second_floor(self, three_scenes):
        result = three_scenes.resize(1, SceneEdge.START, 15.5)

        assert result.outcome == EditOutcome.CLAMPED
        assert _ranges(result.timeline)[1] == (15.0, 16.0)

    def test_start_cannot_go_below_zero(self, three_scenes):
        result = three_scenes.resize(0, SceneEdge.START, -3.0)

        assert result.outcome == EditOutcome.CLAMPED
        assert _ranges(result.timeline)[0] == (0.0, 8.0)

    def test_end_keeps_one_second_floor(self, three_scenes):
        result = three_scenes.resize(1, SceneEdge.END, 8.2)

        assert result.outcome == EditOutcome.CLAMPED
        assert _ranges(result.timeline)[1] == (8.0, 9.0)

    def test_end_is_bounded_by_audio_duration(self, three_scenes, analysis):
        timeline = three_scenes.with_analysis(analysis)

        result = timeline.resize(2, SceneEdge.END, 40.0)

        assert result.outcome == EditOutcome.CLAMPED
        assert _ranges(result.timeline)[2] == (16.0, 30.0)

    def test_end_unbounded_without_audio(self, three_scenes):
        result = three_scenes.resize(2, SceneEdge.END, 40.0)

        assert result.outcome == EditOutcome.HONORED
        assert result.timeline.total_duration_seconds == 40.0

    @pytest.mark.parametrize(("index", "time"), [(5, 3.0), (-1, 3.0), (0, math.nan)])
    def test_invalid_requests_are_rejected(self, three_scenes, index, time):
        result = three_scenes.resize(index, SceneEdge.START, time)

        assert result.outcome == EditOutcome.REJECTED
        assert not result.applied
        assert result.timeline == three_scenes

    def test_every_resize_leaves_valid_scenes(self, three_scenes):
        timeline = three_scenes
        for index in range(3):
            for edge in SceneEdge:
                for target in (-5.0, 0.0, 3.3, 8.1, 15.9, 16.0, 23.9, 50.0):
                    timeline = timeline.resize(index, edge, target).timeline
                    for scene in timeline.scenes:
                        assert scene.time_range.duration_seconds >= 1.0
                        assert scene.time_range.start_seconds >= 0.0

    def test_source_timeline_is_untouched(self, three_scenes):
        three_scenes.resize(0, SceneEdge.END, 5.0)
        assert _ranges(three_scenes)[0] == (0.0, 8.0)


class TestReorderAndDelete:
    def test_reorder_keeps_time_ranges(self, three_scenes):
        result = three_scenes.reorder(0, 2)

        assert result.outcome == EditOutcome.HONORED
        assert [s.visual_description for s in result.timeline.scenes] == [
            "verse",
            "chorus",
            "intro",
        ]
        assert _ranges(result.timeline) == [(8.0, 16.0), (16.0, 24.0), (0.0, 8.0)]
        assert not result.timeline.is_chronological
        assert result.timeline.chronological().scenes == three_scenes.scenes

    def test_reorder_out_of_range_is_rejected(self, three_scenes):
        assert three_scenes.reorder(0, 3).outcome == EditOutcome.REJECTED
        assert three_scenes.reorder(-1, 0).outcome == EditOutcome.REJECTED

    def test_delete_leaves_neighbours_alone(self, three_scenes):
        result = three_scenes.delete(1)

        assert result.outcome == EditOutcome.HONORED
        assert _ranges(result.timeline) == [(0.0, 8.0), (16.0, 24.0)]

    def test_delete_out_of_range_is_rejected(self, three_scenes):
        assert three_scenes.delete(3).outcome == EditOutcome.REJECTED

    def test_deleting_everything_falls_back_to_default_duration(self):
        timeline = TimelineModel(scenes=[make_scene(0.0, 50.0)])
        assert timeline.delete(0).timeline.total_duration_seconds == DEFAULT_TIMELINE_SECONDS


class TestFieldEdits:
    def test_update_scene_fields(self, three_scenes):
        result = three_scenes.update_scene(
            1, visual_description="rain", transition_kind=TransitionKind.WIPE
        )

        scene = result.timeline.scenes[1]
        assert scene.visual_description == "rain"
        assert scene.transition_kind == TransitionKind.WIPE
        assert scene.time_range == three_scenes.scenes[1].time_range

    def test_update_scene_rejects_structural_fields(self, three_scenes):
        with pytest.raises(ValueError, match="time_range"):
            three_scenes.update_scene(0, time_range={"start_seconds": 0, "end_seconds": 1})

    def test_update_scene_invalid_index(self, three_scenes):
        assert three_scenes.update_scene(9, script="x").outcome == EditOutcome.REJECTED

    def test_update_scene_with_unholdable_value_is_rejected(self, three_scenes):
        result = three_scenes.update_scene(0, visual_description=None)

        assert result.outcome == EditOutcome.REJECTED
        assert result.timeline == three_scenes

    def test_update_scene_can_clear_optional_fields(self, three_scenes):
        scripted = three_scenes.update_scene(0, script="hello").timeline
        assert scripted.update_scene(0, script=None).timeline.scenes[0].script is None

    def test_media_success(self, three_scenes):
        timeline = three_scenes.mark_generating(0).timeline
        assert timeline.scenes[0].status == SceneStatus.GENERATING

        timeline = timeline.apply_media_result(0, "vid://0").timeline

        assert timeline.scenes[0].status == SceneStatus.SUCCESS
        assert timeline.scenes[0].has_media

    def test_media_missing_is_an_error(self, three_scenes):
        timeline = three_scenes.apply_media_result(0, None).timeline

        assert timeline.scenes[0].status == SceneStatus.ERROR
        assert timeline.scenes[0].error_message == NO_MEDIA_MESSAGE

    def test_media_error_message_is_kept(self, three_scenes):
        timeline = three_scenes.apply_media_result(2, None, "quota exceeded").timeline
        assert timeline.scenes[2].error_message == "quota exceeded"
