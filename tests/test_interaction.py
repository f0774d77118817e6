"""Tests for the pointer interaction state machine."""

import pytest

from cadence.timeline.interaction import (
    DraggingState,
    HoveringState,
    IdleState,
    InteractionController,
    PointerEvent,
    PointerEventKind,
    ScrubbingState,
    handle_pointer_event,
    hit_test,
)
from cadence.timeline.schemas import EditOutcome, SceneEdge
from cadence.timeline.viewport import Viewport

WIDTH = 240.0


@pytest.fixture
def viewport(three_scenes):
    # 24 seconds across 240 px: 10 px per second, 8 px grab distance is 0.8 s
    return Viewport(duration_seconds=three_scenes.total_duration_seconds)


def _event(kind, x):
    return PointerEvent(kind=kind, x_px=x, width_px=WIDTH)


class TestHitTest:
    def test_first_match_wins_start_before_end(self, three_scenes, viewport):
        hover = hit_test(three_scenes, viewport, 8.0, WIDTH)
        assert hover == HoveringState(scene_index=0, edge=SceneEdge.END)

    def test_start_edge(self, three_scenes, viewport):
        hover = hit_test(three_scenes, viewport, 0.5, WIDTH)
        assert hover == HoveringState(scene_index=0, edge=SceneEdge.START)

    def test_miss(self, three_scenes, viewport):
        assert hit_test(three_scenes, viewport, 4.0, WIDTH) is None


class TestStateMachine:
    def test_move_near_edge_hovers(self, three_scenes, viewport):
        result = handle_pointer_event(
            IdleState(), _event(PointerEventKind.MOVE, 161.0), three_scenes, viewport
        )
        assert result.state == HoveringState(scene_index=1, edge=SceneEdge.END)
        assert not result.seeked

    def test_move_away_returns_to_idle(self, three_scenes, viewport):
        hovering = HoveringState(scene_index=0, edge=SceneEdge.END)
        result = handle_pointer_event(
            hovering, _event(PointerEventKind.MOVE, 40.0), three_scenes, viewport
        )
        assert result.state == IdleState()

    def test_down_on_edge_starts_drag(self, three_scenes, viewport):
        hovering = HoveringState(scene_index=0, edge=SceneEdge.END)
        result = handle_pointer_event(
            hovering, _event(PointerEventKind.DOWN, 80.0), three_scenes, viewport
        )
        assert result.state == DraggingState(scene_index=0, edge=SceneEdge.END)
        assert result.playhead_seconds == viewport.current_time

    def test_drag_resizes(self, three_scenes, viewport):
        dragging = DraggingState(scene_index=0, edge=SceneEdge.END)
        result = handle_pointer_event(
            dragging, _event(PointerEventKind.MOVE, 60.0), three_scenes, viewport
        )
        assert result.edit_outcome == EditOutcome.HONORED
        assert result.timeline.scenes[0].time_range.end_seconds == pytest.approx(6.0)
        assert result.state == dragging

    def test_down_elsewhere_scrubs(self, three_scenes, viewport):
        result = handle_pointer_event(
            IdleState(), _event(PointerEventKind.DOWN, 120.0), three_scenes, viewport
        )
        assert result.state == ScrubbingState()
        assert result.seeked
        assert result.playhead_seconds == pytest.approx(12.0)

    def test_scrub_is_clamped_to_timeline(self, three_scenes, viewport):
        result = handle_pointer_event(
            ScrubbingState(), _event(PointerEventKind.MOVE, -50.0), three_scenes, viewport
        )
        assert result.playhead_seconds == 0.0

    def test_scrub_snaps_to_frames_when_zoomed(self, three_scenes):
        viewport = Viewport(duration_seconds=24.0, zoom=12.0, current_time=12.0)
        result = handle_pointer_event(
            ScrubbingState(), _event(PointerEventKind.MOVE, 1.0), three_scenes, viewport
        )
        assert result.playhead_seconds == pytest.approx(11.0)

    def test_frame_snap_never_passes_the_end(self, three_scenes):
        viewport = Viewport(duration_seconds=10.02, zoom=20.0, current_time=10.02)
        result = handle_pointer_event(
            ScrubbingState(), _event(PointerEventKind.MOVE, WIDTH), three_scenes, viewport
        )
        assert result.playhead_seconds == pytest.approx(10.02)
        assert result.playhead_seconds <= 10.02

    @pytest.mark.parametrize("kind", [PointerEventKind.UP, PointerEventKind.LEAVE])
    def test_release_returns_to_idle(self, three_scenes, viewport, kind):
        dragging = DraggingState(scene_index=1, edge=SceneEdge.START)
        result = handle_pointer_event(dragging, _event(kind, 50.0), three_scenes, viewport)
        assert result.state == IdleState()
        assert result.timeline == three_scenes


class TestController:
    def test_full_drag_gesture(self, three_scenes, viewport):
        controller = InteractionController()
        timeline = three_scenes

        controller.handle(_event(PointerEventKind.MOVE, 81.0), timeline, viewport)
        assert isinstance(controller.state, HoveringState)
        assert not controller.is_active

        controller.handle(_event(PointerEventKind.DOWN, 81.0), timeline, viewport)
        assert controller.is_active

        result = controller.handle(_event(PointerEventKind.MOVE, 100.0), timeline, viewport)
        timeline = result.timeline
        controller.handle(_event(PointerEventKind.UP, 100.0), timeline, viewport)

        assert controller.state == IdleState()
        assert timeline.scenes[0].time_range.end_seconds == pytest.approx(10.0)

    def test_reset(self, three_scenes, viewport):
        controller = InteractionController()
        controller.handle(_event(PointerEventKind.DOWN, 120.0), three_scenes, viewport)
        controller.reset()
        assert controller.state == IdleState()
