"""Playback clock for sequential scene preview."""

import logging

from cadence.common.base_cadence_model import BaseCadenceModel
from cadence.timeline.model import TimelineModel

logger = logging.getLogger(__name__)

PLAYBACK_TICK_SECONDS = 0.05


class PlaybackState(BaseCadenceModel):
    """Playhead position and whether playback is running."""

    current_time: float = 0.0
    is_playing: bool = False


class PlaybackClock:
    """Advances the playhead across a timeline in fixed ticks.

    When the playhead reaches the end of the timeline playback stops and the
    playhead rewinds to 0.
    """

    def __init__(self, tick_seconds: float = PLAYBACK_TICK_SECONDS) -> None:
        """Initialize a stopped clock at 0."""
        if tick_seconds <= 0:
            msg = f"Tick must be positive, got {tick_seconds}"
            raise ValueError(msg)
        self.tick_seconds = tick_seconds
        self._state = PlaybackState()

    @property
    def state(self) -> PlaybackState:
        """Return the current playback state."""
        return self._state

    def play(self) -> PlaybackState:
        self._state = self._state.model_copy(update={"is_playing": True})
        return self._state

    def pause(self) -> PlaybackState:
        self._state = self._state.model_copy(update={"is_playing": False})
        return self._state

    def toggle(self) -> PlaybackState:
        """Play if paused, pause if playing."""
        return self.pause() if self._state.is_playing else self.play()

    def seek(self, time_seconds: float, timeline: TimelineModel) -> PlaybackState:
        """Move the playhead, clamped to the timeline."""
        clamped = max(0.0, min(timeline.total_duration_seconds, time_seconds))
        self._state = self._state.model_copy(update={"current_time": clamped})
        return self._state

    def tick(self, timeline: TimelineModel) -> PlaybackState:
        """Advance one tick if playing.

        Returns:
            The new playback state.
        """
        if not self._state.is_playing:
            return self._state

        total = timeline.total_duration_seconds
        next_time = self._state.current_time + self.tick_seconds
        if next_time >= total:
            logger.debug("Playback reached end of timeline at %.2fs", total)
            self._state = PlaybackState(current_time=0.0, is_playing=False)
        else:
            self._state = PlaybackState(current_time=next_time, is_playing=True)
        return self._state

    def active_scene_index(self, timeline: TimelineModel) -> int | None:
        """Index of the scene under the playhead, if any."""
        return timeline.scene_at(self._state.current_time)
