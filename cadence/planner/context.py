"""Builds the audio context passed to the external scene planner."""

from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.planner.schemas import PlannerAudioContext, SyncMode

MAX_CONTEXT_PEAKS = 40

SYNC_INSTRUCTIONS: dict[SyncMode, str] = {
    SyncMode.BEAT: (
        "SYNC MODE [BEAT]: Align scene cuts strictly to the primary beats. "
        "Use secondary transients for internal visual hits (flashes, zooms) within a scene."
    ),
    SyncMode.ENERGY: (
        "SYNC MODE [ENERGY]: Align scene changes with the energy segments. "
        "Change visuals when the energy moves from low to high, or from build to drop."
    ),
    SyncMode.MIXED: (
        "SYNC MODE [MIXED]: Use rhythmic cuts on primary beats for fast sections and "
        "thematic cuts on energy segments for slow sections. "
        "Use secondary transients for glitch effects."
    ),
}


def build_planner_context(
    analysis: AudioAnalysisResult,
    sync_mode: SyncMode = SyncMode.MIXED,
) -> PlannerAudioContext:
    """Summarize an analysis for the planner.

    Only the first 40 peaks of each class are passed on.
    """
    return PlannerAudioContext(
        duration_seconds=analysis.duration_seconds,
        segments=analysis.segments,
        primary_peaks=analysis.primary_peaks[:MAX_CONTEXT_PEAKS],
        secondary_peaks=analysis.secondary_peaks[:MAX_CONTEXT_PEAKS],
        sync_mode=sync_mode,
        sync_instructions=SYNC_INSTRUCTIONS[sync_mode],
    )
