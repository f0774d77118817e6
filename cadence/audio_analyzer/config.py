"""Tunable constants for the audio analyzer."""

from cadence.common.base_cadence_model import BaseCadenceModel


class PeakBandConfig(BaseCadenceModel):
    """Filter and peak-picking settings for one frequency band."""

    filter_type: str  # "lowpass" or "highpass"
    cutoff_hz: float
    threshold: float
    decay: float


class AnalyzerConfig(BaseCadenceModel):
    """Configuration for energy analysis and peak detection."""

    window_seconds: float = 0.1
    filter_order: int = 2

    # Zone thresholds, relative to the mean of the normalized curve
    high_ratio: float = 1.3
    build_ratio: float = 0.9
    drop_energy: float = 0.8
    debounce_windows: int = 3

    # Coefficient of variation (std / mean) at or below which the curve is
    # flat and every window is LOW. Steady noise sits around 0.015 at 100 ms
    # windows, so this also covers constant-level noise, not just pure tones.
    flat_curve_tolerance: float = 0.05

    bass: PeakBandConfig = PeakBandConfig(
        filter_type="lowpass",
        cutoff_hz=150.0,
        threshold=0.10,
        decay=0.05,
    )
    treble: PeakBandConfig = PeakBandConfig(
        filter_type="highpass",
        cutoff_hz=2500.0,
        threshold=0.05,
        decay=0.02,
    )


DEFAULT_ANALYZER_CONFIG = AnalyzerConfig()
