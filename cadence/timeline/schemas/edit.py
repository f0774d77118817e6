"""Outcome schema for timeline edits."""

from enum import StrEnum, auto


class EditOutcome(StrEnum):
    """How a requested edit was applied."""

    HONORED = auto()  # applied exactly as requested
    CLAMPED = auto()  # applied with the value limited to a valid range
    SNAPPED = auto()  # applied with the edge snapped onto a neighbour
    REJECTED = auto()  # not applied; the timeline is unchanged
