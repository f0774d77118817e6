"""Viewport: maps between timeline seconds and screen pixels."""

import math

from pydantic import Field

from cadence.common.base_cadence_model import BaseCadenceModel

FRAMES_PER_SECOND = 30
FRAME_TICK_MIN_PIXELS_PER_SECOND = 150.0


class Viewport(BaseCadenceModel):
    """The visible window of the timeline for a given zoom and playhead.

    The window is ``duration / zoom`` long and centered on the playhead,
    clamped so it never runs past either end of the timeline.
    """

    duration_seconds: float = Field(ge=0)
    zoom: float = 1.0
    current_time: float = 0.0

    @property
    def effective_zoom(self) -> float:
        """Zoom level, never below 1."""
        return max(1.0, self.zoom)

    @property
    def visible_duration(self) -> float:
        """Seconds of timeline visible at once."""
        return self.duration_seconds / self.effective_zoom

    @property
    def view_start(self) -> float:
        """Timeline second at the left edge of the view."""
        latest_start = max(0.0, self.duration_seconds - self.visible_duration)
        return min(max(self.current_time - self.visible_duration / 2, 0.0), latest_start)

    @property
    def view_end(self) -> float:
        """Timeline second at the right edge of the view."""
        return self.view_start + self.visible_duration

    def pixels_per_second(self, width_px: float) -> float:
        """Horizontal scale at the given canvas width."""
        if self.visible_duration <= 0:
            return 0.0
        return width_px / self.visible_duration

    def time_to_pixel(self, time_seconds: float, width_px: float) -> float:
        """Map a timeline second onto an x coordinate."""
        if self.visible_duration <= 0:
            return 0.0
        return (time_seconds - self.view_start) / self.visible_duration * width_px

    def pixel_to_time(self, x_px: float, width_px: float) -> float:
        """Map an x coordinate back onto a timeline second."""
        if width_px <= 0:
            return self.view_start
        return self.view_start + (x_px / width_px) * self.visible_duration

    def pixels_to_seconds(self, pixels: float, width_px: float) -> float:
        """Convert a pixel distance into a duration at the current scale."""
        if width_px <= 0:
            return 0.0
        return pixels / width_px * self.visible_duration

    def shows_frame_ticks(self, width_px: float) -> bool:
        """Frame gridlines are drawn only when zoomed in far enough."""
        return self.pixels_per_second(width_px) > FRAME_TICK_MIN_PIXELS_PER_SECOND

    def second_marks(self) -> list[int]:
        """Whole seconds inside the visible window."""
        first = math.ceil(self.view_start)
        last = math.floor(self.view_end)
        return list(range(first, last + 1))

    def frame_marks(self) -> list[float]:
        """Sub-second frame times inside the visible window (30 fps grid)."""
        marks: list[float] = []
        for second in range(math.floor(self.view_start), math.ceil(self.view_end) + 1):
            for frame in range(1, FRAMES_PER_SECOND):
                time = second + frame / FRAMES_PER_SECOND
                if self.view_start <= time <= self.view_end:
                    marks.append(time)
        return marks
