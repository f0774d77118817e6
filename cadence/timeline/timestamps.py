"""Parsing and formatting of the ``"M:SS-M:SS"`` scene timestamp format.

The stored form carries whole seconds only; parsing is best effort and yields
``nan`` for malformed input instead of raising.
"""

import math

from cadence.timeline.schemas import TimeRange


def parse_timestamp(text: str) -> float:
    """Parse ``"M:SS"`` (seconds may be fractional) into seconds, or ``nan``."""
    parts = text.strip().split(":")
    if len(parts) < 2:
        return math.nan
    try:
        minutes = int(parts[0])
        seconds = float(parts[1])
    except ValueError:
        return math.nan
    return minutes * 60 + seconds


def parse_time_range(text: str) -> tuple[float, float]:
    """Parse ``"M:SS-M:SS"`` into (start, end); malformed parts become ``nan``."""
    parts = text.split("-")
    if len(parts) != 2:
        return math.nan, math.nan
    return parse_timestamp(parts[0]), parse_timestamp(parts[1])


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``"M:SS"``, dropping the fractional part."""
    minutes = math.floor(seconds / 60)
    secs = math.floor(seconds % 60)
    return f"{minutes}:{secs:02d}"


def format_time_range(time_range: TimeRange) -> str:
    """Format a range as ``"M:SS-M:SS"``."""
    return f"{format_timestamp(time_range.start_seconds)}-{format_timestamp(time_range.end_seconds)}"


def is_valid_range(start: float, end: float) -> bool:
    """Return True if the parsed bounds describe a usable range."""
    return math.isfinite(start) and math.isfinite(end) and 0 <= start < end
