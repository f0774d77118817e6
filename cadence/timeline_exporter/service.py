"""TimelineExporter service for converting a scene timeline to OTIO."""

import logging
from pathlib import Path

import opentimelineio as otio

from cadence.timeline.model import TimelineModel
from cadence.timeline.schemas import Scene

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = 30.0


class TimelineExporterService:
    """Service for handing a scene timeline to the render/merge stage as OTIO."""

    def __init__(self, frame_rate: float = DEFAULT_FRAME_RATE) -> None:
        """Initialize the exporter.

        Args:
            frame_rate: Frame rate used for all OTIO times.
        """
        if frame_rate <= 0:
            msg = f"Frame rate must be positive, got {frame_rate}"
            raise ValueError(msg)
        self.frame_rate = frame_rate

    def build(
        self,
        timeline: TimelineModel,
        name: str = "Cadence Edit",
        audio_url: str | None = None,
    ) -> otio.schema.Timeline:
        """Create an OTIO timeline from a scene timeline.

        Args:
            timeline: The scene timeline.
            name: Name stored on the OTIO timeline.
            audio_url: Location of the music track, if it should be included.

        Returns:
            OTIO timeline with a video track and, when ``audio_url`` is given,
            a music track.
        """
        otio_timeline = otio.schema.Timeline(name=name)
        otio_timeline.global_start_time = otio.opentime.RationalTime(0, self.frame_rate)
        otio_timeline.tracks.append(self._create_video_track(timeline))

        if audio_url is not None:
            duration = (
                timeline.analysis.duration_seconds
                if timeline.analysis is not None
                else timeline.total_duration_seconds
            )
            otio_timeline.tracks.append(self._create_audio_track(audio_url, duration))

        return otio_timeline

    def write_to_string(
        self,
        timeline: TimelineModel,
        name: str = "Cadence Edit",
        audio_url: str | None = None,
    ) -> str:
        """Serialize the timeline as OTIO JSON."""
        return otio.adapters.write_to_string(
            self.build(timeline, name=name, audio_url=audio_url), "otio_json"
        )

    def write_to_file(
        self,
        timeline: TimelineModel,
        output_path: Path,
        name: str = "Cadence Edit",
        audio_url: str | None = None,
    ) -> Path:
        """Write the timeline to an .otio file.

        Returns:
            The path to the saved OTIO file.
        """
        otio.adapters.write_to_file(
            self.build(timeline, name=name, audio_url=audio_url), str(output_path)
        )
        return output_path

    def _create_video_track(self, timeline: TimelineModel) -> otio.schema.Track:
        """Lay scenes out in time order, filling holes with gaps."""
        video_track = otio.schema.Track(name="Video", kind=otio.schema.TrackKind.Video)

        ordered = sorted(
            enumerate(timeline.scenes),
            key=lambda item: item[1].time_range.start_seconds,
        )
        current_time = 0.0

        for index, scene in ordered:
            start = scene.time_range.start_seconds
            end = scene.time_range.end_seconds

            if end <= current_time:
                logger.warning(
                    "Scene %d (%.2f-%.2f) is hidden by earlier scenes; skipped in export",
                    index,
                    start,
                    end,
                )
                continue
            if start < current_time:
                logger.warning(
                    "Scene %d overlaps the previous scene; trimming start %.2f -> %.2f",
                    index,
                    start,
                    current_time,
                )
                start = current_time

            if start > current_time:
                video_track.append(self._create_gap(start - current_time))

            video_track.append(self._create_scene_clip(index, scene, end - start))
            current_time = end

        return video_track

    def _create_scene_clip(
        self,
        index: int,
        scene: Scene,
        duration_seconds: float,
    ) -> otio.schema.Clip:
        """Create an OTIO clip for one scene."""
        media_ref: otio.core.MediaReference
        if scene.generated_media_ref is not None:
            media_ref = otio.schema.ExternalReference(target_url=scene.generated_media_ref)
        else:
            media_ref = otio.schema.MissingReference()

        clip = otio.schema.Clip(
            name=f"scene_{index + 1}",
            media_reference=media_ref,
            source_range=self._range(0.0, duration_seconds),
        )
        metadata: dict[str, str | int] = {
            "scene_index": index,
            "transition": str(scene.transition_kind),
            "status": str(scene.status),
            "visual_description": scene.visual_description,
            "audio_note": scene.audio_note,
        }
        if scene.voiceover_ref is not None:
            metadata["voiceover_ref"] = scene.voiceover_ref
        clip.metadata["cadence"] = metadata
        return clip

    def _create_audio_track(self, audio_url: str, duration_seconds: float) -> otio.schema.Track:
        """Create the music track spanning the whole audio."""
        audio_track = otio.schema.Track(name="Music", kind=otio.schema.TrackKind.Audio)
        if duration_seconds <= 0:
            return audio_track

        clip = otio.schema.Clip(
            name="music",
            media_reference=otio.schema.ExternalReference(target_url=audio_url),
            source_range=self._range(0.0, duration_seconds),
        )
        audio_track.append(clip)
        return audio_track

    def _create_gap(self, duration_seconds: float) -> otio.schema.Gap:
        """Create a gap of specified duration."""
        return otio.schema.Gap(source_range=self._range(0.0, duration_seconds))

    def _range(self, start_seconds: float, duration_seconds: float) -> otio.opentime.TimeRange:
        return otio.opentime.TimeRange(
            start_time=otio.opentime.RationalTime(start_seconds * self.frame_rate, self.frame_rate),
            duration=otio.opentime.RationalTime(
                duration_seconds * self.frame_rate, self.frame_rate
            ),
        )
