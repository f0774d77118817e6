"""Providers for timeline exporter service."""

from functools import cache

from cadence.timeline_exporter.service import TimelineExporterService


@cache
def timeline_exporter_service() -> TimelineExporterService:
    """Provide a cached instance of the TimelineExporterService."""
    return TimelineExporterService()
