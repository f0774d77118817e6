"""InteractionController: pointer-driven hover, drag-resize and scrubbing."""

from enum import StrEnum, auto
from typing import Annotated, Literal

from pydantic import Field

from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.model import TimelineModel
from cadence.timeline.schemas import EditOutcome, SceneEdge
from cadence.timeline.viewport import FRAMES_PER_SECOND, Viewport

HIT_THRESHOLD_PX = 8.0
FRAME_SNAP_MIN_ZOOM = 10.0


class PointerEventKind(StrEnum):
    """Kind of pointer event fed to the controller."""

    DOWN = auto()
    MOVE = auto()
    UP = auto()
    LEAVE = auto()


class PointerEvent(BaseCadenceModel):
    """A pointer event in canvas coordinates."""

    kind: PointerEventKind
    x_px: float
    width_px: float = Field(gt=0)


class IdleState(BaseCadenceModel):
    kind: Literal["idle"] = "idle"


class HoveringState(BaseCadenceModel):
    kind: Literal["hovering"] = "hovering"
    scene_index: int
    edge: SceneEdge


class DraggingState(BaseCadenceModel):
    kind: Literal["dragging"] = "dragging"
    scene_index: int
    edge: SceneEdge


class ScrubbingState(BaseCadenceModel):
    kind: Literal["scrubbing"] = "scrubbing"


InteractionState = Annotated[
    IdleState | HoveringState | DraggingState | ScrubbingState,
    Field(discriminator="kind"),
]


class InteractionResult(BaseCadenceModel):
    """Outcome of feeding one pointer event to the state machine."""

    state: InteractionState
    timeline: TimelineModel
    playhead_seconds: float
    seeked: bool = False
    edit_outcome: EditOutcome | None = None


def hit_test(
    timeline: TimelineModel,
    viewport: Viewport,
    time_seconds: float,
    width_px: float,
    threshold_px: float = HIT_THRESHOLD_PX,
) -> HoveringState | None:
    """Find the first scene edge within ``threshold_px`` of ``time_seconds``.

    Scenes are checked in order, start edge before end edge.
    """
    threshold = viewport.pixels_to_seconds(threshold_px, width_px)
    for index, scene in enumerate(timeline.scenes):
        if abs(time_seconds - scene.time_range.start_seconds) < threshold:
            return HoveringState(scene_index=index, edge=SceneEdge.START)
        if abs(time_seconds - scene.time_range.end_seconds) < threshold:
            return HoveringState(scene_index=index, edge=SceneEdge.END)
    return None


def handle_pointer_event(
    state: IdleState | HoveringState | DraggingState | ScrubbingState,
    event: PointerEvent,
    timeline: TimelineModel,
    viewport: Viewport,
    hit_threshold_px: float = HIT_THRESHOLD_PX,
) -> InteractionResult:
    """Advance the interaction state machine by one event.

    Args:
        state: Current controller state.
        event: Incoming pointer event.
        timeline: Timeline being edited.
        viewport: Current viewport (duration, zoom, playhead).
        hit_threshold_px: Edge grab distance in pixels.

    Returns:
        InteractionResult with the next state, the (possibly resized)
        timeline and the playhead position.
    """
    playhead = viewport.current_time
    pointer_time = _clamp(
        viewport.pixel_to_time(event.x_px, event.width_px), viewport.duration_seconds
    )

    if event.kind in (PointerEventKind.UP, PointerEventKind.LEAVE):
        return InteractionResult(state=IdleState(), timeline=timeline, playhead_seconds=playhead)

    if event.kind == PointerEventKind.DOWN:
        if isinstance(state, HoveringState):
            return InteractionResult(
                state=DraggingState(scene_index=state.scene_index, edge=state.edge),
                timeline=timeline,
                playhead_seconds=playhead,
            )
        return InteractionResult(
            state=ScrubbingState(),
            timeline=timeline,
            playhead_seconds=pointer_time,
            seeked=True,
        )

    if isinstance(state, ScrubbingState):
        seek = pointer_time
        if viewport.zoom > FRAME_SNAP_MIN_ZOOM:
            seek = _clamp(
                round(seek * FRAMES_PER_SECOND) / FRAMES_PER_SECOND, viewport.duration_seconds
            )
        return InteractionResult(
            state=state, timeline=timeline, playhead_seconds=seek, seeked=True
        )

    if isinstance(state, DraggingState):
        result = timeline.resize(state.scene_index, state.edge, pointer_time)
        return InteractionResult(
            state=state,
            timeline=result.timeline,
            playhead_seconds=playhead,
            edit_outcome=result.outcome,
        )

    hover = hit_test(timeline, viewport, pointer_time, event.width_px, hit_threshold_px)
    return InteractionResult(
        state=hover if hover is not None else IdleState(),
        timeline=timeline,
        playhead_seconds=playhead,
    )


class InteractionController:
    """Holds the pointer state machine's current state between events."""

    def __init__(self, hit_threshold_px: float = HIT_THRESHOLD_PX) -> None:
        """Initialize the controller in the idle state."""
        self._hit_threshold_px = hit_threshold_px
        self._state: IdleState | HoveringState | DraggingState | ScrubbingState = IdleState()

    @property
    def state(self) -> IdleState | HoveringState | DraggingState | ScrubbingState:
        """Return the current state."""
        return self._state

    @property
    def is_active(self) -> bool:
        """True while a drag or scrub is in flight.

        Structural edits (reorder, delete, split) should wait until this is
        False so they do not interleave with a live resize.
        """
        return isinstance(self._state, DraggingState | ScrubbingState)

    def handle(
        self,
        event: PointerEvent,
        timeline: TimelineModel,
        viewport: Viewport,
    ) -> InteractionResult:
        """Feed one event and remember the resulting state."""
        result = handle_pointer_event(
            self._state, event, timeline, viewport, self._hit_threshold_px
        )
        self._state = result.state
        return result

    def reset(self) -> None:
        """Return to the idle state."""
        self._state = IdleState()


def _clamp(time_seconds: float, duration: float) -> float:
    return max(0.0, min(duration, time_seconds))
