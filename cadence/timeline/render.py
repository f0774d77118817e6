"""Pure derivation of draw commands from timeline and viewport state.

The drawing backend (canvas, GPU surface, terminal) only has to understand
three primitives: rectangles, lines and text, each tagged with a role that
the backend maps onto its own styling.
"""

from enum import StrEnum, auto
from typing import Annotated, Literal

from pydantic import Field

from cadence.audio_analyzer.schemas import EnergyLevel
from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.interaction import DraggingState, HoveringState
from cadence.timeline.model import TimelineModel
from cadence.timeline.schemas import SceneEdge
from cadence.timeline.viewport import Viewport

HANDLE_WIDTH_PX = 6.0
MIN_LABEL_WIDTH_PX = 30.0
WAVEFORM_HEIGHT_RATIO = 0.7
LOUD_WINDOW_ENERGY = 0.8
FRAME_TICK_HEIGHT_PX = 6.0
PEAK_MARKER_RATIO = 0.15


class DrawRole(StrEnum):
    """Semantic role of a draw command."""

    SEGMENT_LOW = auto()
    SEGMENT_BUILD = auto()
    SEGMENT_HIGH = auto()
    SCENE_BOX = auto()
    SCENE_OUTLINE = auto()
    SCENE_ACTIVE = auto()
    HANDLE = auto()
    HANDLE_ACTIVE = auto()
    GRIP = auto()
    SCENE_LABEL = auto()
    WAVEFORM_PLAYED = auto()
    WAVEFORM_UNPLAYED = auto()
    WAVEFORM_LOUD_PLAYED = auto()
    WAVEFORM_LOUD_UNPLAYED = auto()
    PRIMARY_PEAK = auto()
    SECONDARY_PEAK = auto()
    SECOND_GRID = auto()
    FRAME_TICK = auto()
    PLAYHEAD = auto()


class RectCommand(BaseCadenceModel):
    kind: Literal["rect"] = "rect"
    x: float
    y: float
    width: float
    height: float
    role: DrawRole
    filled: bool = True


class LineCommand(BaseCadenceModel):
    kind: Literal["line"] = "line"
    x1: float
    y1: float
    x2: float
    y2: float
    role: DrawRole


class TextCommand(BaseCadenceModel):
    kind: Literal["text"] = "text"
    x: float
    y: float
    text: str
    role: DrawRole


DrawCommand = Annotated[
    RectCommand | LineCommand | TextCommand,
    Field(discriminator="kind"),
]

_SEGMENT_ROLES = {
    EnergyLevel.LOW: DrawRole.SEGMENT_LOW,
    EnergyLevel.BUILD: DrawRole.SEGMENT_BUILD,
    EnergyLevel.HIGH: DrawRole.SEGMENT_HIGH,
}


def render_timeline(
    timeline: TimelineModel,
    viewport: Viewport,
    width_px: float,
    height_px: float,
    interaction_state: BaseCadenceModel | None = None,
) -> list[RectCommand | LineCommand | TextCommand]:
    """Derive the draw commands for the current state.

    Layers are emitted back to front: energy zones, scenes, waveform, peak
    markers, grid, playhead. Nothing outside the visible window is emitted.
    """
    commands: list[RectCommand | LineCommand | TextCommand] = []
    commands.extend(_segment_commands(timeline, viewport, width_px, height_px))
    commands.extend(_scene_commands(timeline, viewport, width_px, height_px, interaction_state))
    commands.extend(_waveform_commands(timeline, viewport, width_px, height_px))
    commands.extend(_peak_commands(timeline, viewport, width_px, height_px))
    commands.extend(_grid_commands(viewport, width_px, height_px))

    playhead_x = viewport.time_to_pixel(viewport.current_time, width_px)
    if 0 <= playhead_x <= width_px:
        commands.append(
            LineCommand(x1=playhead_x, y1=0, x2=playhead_x, y2=height_px, role=DrawRole.PLAYHEAD)
        )
    return commands


def _span_px(duration: float, viewport: Viewport, width_px: float) -> float:
    if viewport.visible_duration <= 0:
        return 0.0
    return duration / viewport.visible_duration * width_px


def _segment_commands(
    timeline: TimelineModel,
    viewport: Viewport,
    width_px: float,
    height_px: float,
) -> list[RectCommand]:
    if timeline.analysis is None:
        return []

    commands: list[RectCommand] = []
    for segment in timeline.analysis.segments:
        x = viewport.time_to_pixel(segment.start_seconds, width_px)
        w = _span_px(segment.duration_seconds, viewport, width_px)
        if x + w < 0 or x > width_px:
            continue
        commands.append(
            RectCommand(
                x=x, y=0, width=w, height=height_px, role=_SEGMENT_ROLES[segment.energy_level]
            )
        )
    return commands


def _scene_commands(
    timeline: TimelineModel,
    viewport: Viewport,
    width_px: float,
    height_px: float,
    interaction_state: BaseCadenceModel | None,
) -> list[RectCommand | TextCommand]:
    active_edge: tuple[int, SceneEdge] | None = None
    if isinstance(interaction_state, HoveringState | DraggingState):
        active_edge = (interaction_state.scene_index, interaction_state.edge)

    box_y = 2.0
    box_h = height_px - 4
    commands: list[RectCommand | TextCommand] = []

    for index, scene in enumerate(timeline.scenes):
        x = viewport.time_to_pixel(scene.time_range.start_seconds, width_px)
        w = _span_px(scene.time_range.duration_seconds, viewport, width_px)
        x_end = x + w
        if x_end < 0 or x > width_px:
            continue

        commands.append(RectCommand(x=x, y=box_y, width=w, height=box_h, role=DrawRole.SCENE_BOX))
        commands.append(
            RectCommand(
                x=x, y=box_y, width=w, height=box_h, role=DrawRole.SCENE_OUTLINE, filled=False
            )
        )
        if scene.time_range.contains(viewport.current_time):
            commands.append(
                RectCommand(x=x, y=box_y, width=w, height=box_h, role=DrawRole.SCENE_ACTIVE)
            )

        start_active = active_edge == (index, SceneEdge.START)
        end_active = active_edge == (index, SceneEdge.END)

        if x >= -HANDLE_WIDTH_PX:
            commands.append(
                RectCommand(
                    x=x,
                    y=box_y,
                    width=2,
                    height=box_h,
                    role=DrawRole.HANDLE_ACTIVE if start_active else DrawRole.HANDLE,
                )
            )
            if start_active:
                commands.append(
                    RectCommand(x=x - 2, y=height_px / 2 - 6, width=6, height=12, role=DrawRole.GRIP)
                )

        if x_end <= width_px + HANDLE_WIDTH_PX:
            commands.append(
                RectCommand(
                    x=x_end - 2,
                    y=box_y,
                    width=2,
                    height=box_h,
                    role=DrawRole.HANDLE_ACTIVE if end_active else DrawRole.HANDLE,
                )
            )
            if end_active:
                commands.append(
                    RectCommand(
                        x=x_end - 4, y=height_px / 2 - 6, width=6, height=12, role=DrawRole.GRIP
                    )
                )

        if w > MIN_LABEL_WIDTH_PX:
            commands.append(TextCommand(x=x + 4, y=12, text=str(index + 1), role=DrawRole.SCENE_LABEL))

    return commands


def _waveform_commands(
    timeline: TimelineModel,
    viewport: Viewport,
    width_px: float,
    height_px: float,
) -> list[RectCommand]:
    analysis = timeline.analysis
    if analysis is None or not analysis.energy_curve or analysis.duration_seconds <= 0:
        return []

    curve = analysis.energy_curve
    samples_per_second = len(curve) / analysis.duration_seconds
    visible_fraction = viewport.visible_duration / analysis.duration_seconds
    bar_width = max(2.0, width_px / (len(curve) * visible_fraction)) if visible_fraction > 0 else 2.0
    start_index = max(0, int(viewport.view_start * samples_per_second))
    end_index = min(len(curve), int(-(-viewport.view_end * samples_per_second // 1)))
    center_y = height_px / 2

    commands: list[RectCommand] = []
    for i in range(start_index, end_index):
        time = i * analysis.duration_seconds / len(curve)
        value = curve[i]
        bar_height = value * height_px * WAVEFORM_HEIGHT_RATIO
        played = time < viewport.current_time
        if value > LOUD_WINDOW_ENERGY:
            role = DrawRole.WAVEFORM_LOUD_PLAYED if played else DrawRole.WAVEFORM_LOUD_UNPLAYED
        else:
            role = DrawRole.WAVEFORM_PLAYED if played else DrawRole.WAVEFORM_UNPLAYED

        commands.append(
            RectCommand(
                x=viewport.time_to_pixel(time, width_px),
                y=center_y - bar_height / 2,
                width=max(1.0, bar_width - 1),
                height=bar_height,
                role=role,
            )
        )
    return commands


def _peak_commands(
    timeline: TimelineModel,
    viewport: Viewport,
    width_px: float,
    height_px: float,
) -> list[LineCommand]:
    analysis = timeline.analysis
    if analysis is None:
        return []

    marker = height_px * PEAK_MARKER_RATIO
    commands: list[LineCommand] = []
    for peak in analysis.primary_peaks:
        if viewport.view_start <= peak <= viewport.view_end:
            x = viewport.time_to_pixel(peak, width_px)
            commands.append(LineCommand(x1=x, y1=0, x2=x, y2=marker, role=DrawRole.PRIMARY_PEAK))
    for peak in analysis.secondary_peaks:
        if viewport.view_start <= peak <= viewport.view_end:
            x = viewport.time_to_pixel(peak, width_px)
            commands.append(
                LineCommand(
                    x1=x, y1=height_px - marker, x2=x, y2=height_px, role=DrawRole.SECONDARY_PEAK
                )
            )
    return commands


def _grid_commands(viewport: Viewport, width_px: float, height_px: float) -> list[LineCommand]:
    commands: list[LineCommand] = []
    for second in viewport.second_marks():
        x = viewport.time_to_pixel(second, width_px)
        if 0 <= x <= width_px:
            commands.append(LineCommand(x1=x, y1=0, x2=x, y2=height_px, role=DrawRole.SECOND_GRID))

    if viewport.shows_frame_ticks(width_px):
        for time in viewport.frame_marks():
            x = viewport.time_to_pixel(time, width_px)
            commands.append(
                LineCommand(
                    x1=x,
                    y1=height_px - FRAME_TICK_HEIGHT_PX,
                    x2=x,
                    y2=height_px,
                    role=DrawRole.FRAME_TICK,
                )
            )
    return commands
