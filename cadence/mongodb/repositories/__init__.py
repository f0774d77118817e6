"""MongoDB repositories for Cadence entities."""

from cadence.mongodb.repositories.project_repository import ProjectRepository

__all__ = [
    "ProjectRepository",
]
