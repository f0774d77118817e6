"""MongoDB document schemas."""

from cadence.mongodb.schemas.documents import ProjectDocument

__all__ = [
    "ProjectDocument",
]
