"""Small builders for timeline test data."""

from cadence.timeline.schemas import Scene, TimeRange


def make_scene(start: float, end: float, **fields: object) -> Scene:
    return Scene(time_range=TimeRange(start_seconds=start, end_seconds=end), **fields)
