"""The Analyzer: turns an audio buffer into an energy curve, energy zones and peaks."""

import logging

import numpy as np
from scipy.signal import butter, sosfilt

from cadence.audio_analyzer.config import (
    DEFAULT_ANALYZER_CONFIG,
    AnalyzerConfig,
    PeakBandConfig,
)
from cadence.audio_analyzer.decoder import decode_audio
from cadence.audio_analyzer.schemas import (
    AudioAnalysisResult,
    EnergyLevel,
    EnergySegment,
)

logger = logging.getLogger(__name__)


def analyze_audio_bytes(
    data: bytes,
    config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
) -> AudioAnalysisResult:
    """Decode and analyze an encoded audio buffer.

    Args:
        data: Encoded audio bytes.
        config: Analysis constants.

    Returns:
        AudioAnalysisResult for the decoded track.

    Raises:
        AudioDecodeError: If decoding fails. No partial result is produced.
    """
    samples, sample_rate = decode_audio(data)
    return analyze_audio(samples, sample_rate, config)


def analyze_audio(
    samples: np.ndarray,
    sample_rate: int,
    config: AnalyzerConfig = DEFAULT_ANALYZER_CONFIG,
) -> AudioAnalysisResult:
    """Analyze a mono sample buffer.

    Args:
        samples: Mono samples (left channel for stereo sources).
        sample_rate: Samples per second.
        config: Analysis constants.

    Returns:
        AudioAnalysisResult with energy curve, segments and both peak sets.
    """
    if sample_rate <= 0:
        msg = f"Sample rate must be positive, got {sample_rate}"
        raise ValueError(msg)

    samples = np.asarray(samples, dtype=np.float64)
    duration = len(samples) / sample_rate
    samples_per_window = int(sample_rate * config.window_seconds)

    if samples_per_window == 0 or len(samples) < samples_per_window:
        logger.info("Buffer shorter than one window (%.3fs); single segment", duration)
        return AudioAnalysisResult(
            duration_seconds=duration,
            energy_curve=[],
            segments=[
                EnergySegment(
                    start_seconds=0.0,
                    end_seconds=round(duration, 2),
                    energy_level=EnergyLevel.LOW,
                )
            ],
            primary_peaks=[],
            secondary_peaks=[],
        )

    rms = _window_rms(samples, samples_per_window)
    max_rms = float(rms.max())
    curve = rms / max_rms if max_rms > 0 else np.zeros_like(rms)

    levels = _classify_windows(curve, config)
    segments = _build_segments(curve, levels, duration, config)

    bass = _band_filter(samples, sample_rate, config.bass, config.filter_order)
    treble = _band_filter(samples, sample_rate, config.treble, config.filter_order)
    primary_peaks = _detect_peaks(
        _window_rms(bass, samples_per_window), config.bass, config.window_seconds
    )
    secondary_peaks = _detect_peaks(
        _window_rms(treble, samples_per_window), config.treble, config.window_seconds
    )

    logger.info(
        "Analyzed %.2fs of audio: %d windows, %d segments, %d primary peaks, %d secondary peaks",
        duration,
        len(curve),
        len(segments),
        len(primary_peaks),
        len(secondary_peaks),
    )

    return AudioAnalysisResult(
        duration_seconds=duration,
        energy_curve=[float(e) for e in curve],
        segments=segments,
        primary_peaks=primary_peaks,
        secondary_peaks=secondary_peaks,
    )


def _window_rms(data: np.ndarray, samples_per_window: int) -> np.ndarray:
    """Compute RMS per full window; a trailing partial window is dropped."""
    num_windows = len(data) // samples_per_window
    if num_windows == 0:
        return np.zeros(0)
    frames = data[: num_windows * samples_per_window].reshape(num_windows, samples_per_window)
    return np.sqrt(np.mean(np.square(frames), axis=1))


def _band_filter(
    samples: np.ndarray,
    sample_rate: int,
    band: PeakBandConfig,
    order: int,
) -> np.ndarray:
    """Render a biquad low/high-pass version of the buffer."""
    nyquist = sample_rate / 2
    cutoff = min(band.cutoff_hz, nyquist * 0.99)
    sos = butter(order, cutoff, btype=band.filter_type, fs=sample_rate, output="sos")
    return sosfilt(sos, samples)


def _classify_windows(curve: np.ndarray, config: AnalyzerConfig) -> list[EnergyLevel]:
    """Classify each window against the curve's mean energy."""
    if len(curve) == 0:
        return []

    # No dynamic range (silence or a steady level) means no zones to tell apart
    avg = float(curve.mean())
    if avg == 0 or float(curve.std()) / avg <= config.flat_curve_tolerance:
        return [EnergyLevel.LOW] * len(curve)

    return [_level_for(float(e), avg, config) for e in curve]


def _level_for(energy: float, avg: float, config: AnalyzerConfig) -> EnergyLevel:
    if energy > avg * config.high_ratio:
        return EnergyLevel.HIGH
    if energy > avg * config.build_ratio:
        return EnergyLevel.BUILD
    return EnergyLevel.LOW


def _build_segments(
    curve: np.ndarray,
    levels: list[EnergyLevel],
    duration: float,
    config: AnalyzerConfig,
) -> list[EnergySegment]:
    """Merge classified windows into debounced, contiguous segments.

    A change into HIGH above the drop energy is confirmed at once. Any other
    change is confirmed only when none of the following ``debounce_windows``
    windows fall back to the current level.
    """
    window = config.window_seconds
    segments: list[EnergySegment] = []
    current_start = 0
    current_level = levels[0]

    for i in range(1, len(levels)):
        level = levels[i]
        if level == current_level:
            continue

        is_drop = level == EnergyLevel.HIGH and float(curve[i]) > config.drop_energy
        confirmed = is_drop or not any(
            levels[i + k] == current_level
            for k in range(1, config.debounce_windows + 1)
            if i + k < len(levels)
        )

        if confirmed:
            segments.append(
                EnergySegment(
                    start_seconds=round(current_start * window, 2),
                    end_seconds=round(i * window, 2),
                    energy_level=current_level,
                )
            )
            current_start = i
            current_level = level

    segments.append(
        EnergySegment(
            start_seconds=round(current_start * window, 2),
            end_seconds=round(duration, 2),
            energy_level=current_level,
        )
    )
    return segments


def _detect_peaks(
    band_rms: np.ndarray,
    band: PeakBandConfig,
    window_seconds: float,
) -> list[float]:
    """Find local RMS maxima that clear the band's threshold and rise."""
    peaks: list[float] = []
    for i in range(1, len(band_rms) - 1):
        rms = float(band_rms[i])
        prev_rms = float(band_rms[i - 1])
        next_rms = float(band_rms[i + 1])

        if rms > prev_rms and rms > next_rms and rms > band.threshold:
            if rms - prev_rms > band.decay:
                peaks.append(round(i * window_seconds, 2))

    return peaks
