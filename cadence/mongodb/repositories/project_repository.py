"""Repository for Project documents."""

from bson import ObjectId
from pydantic_mongo import AsyncAbstractRepository

from cadence.audio_analyzer.schemas import AudioAnalysisResult
from cadence.mongodb.client import get_mongodb_client
from cadence.mongodb.schemas import ProjectDocument
from cadence.timeline.model import TimelineModel


class ProjectRepository(AsyncAbstractRepository[ProjectDocument]):
    """Repository for storing and retrieving projects."""

    class Meta:  # pyright: ignore[reportIncompatibleVariableOverride]
        collection_name = "projects"

    @classmethod
    def create(cls) -> "ProjectRepository":
        """Create a repository instance with the default database."""
        client = get_mongodb_client()
        return cls(client.database)  # pyright: ignore[reportArgumentType]

    async def create_project(
        self,
        name: str,
        description: str = "",
    ) -> ProjectDocument:
        """Create a new project.

        Args:
            name: Name of the project.
            description: Optional description.

        Returns:
            The created ProjectDocument with ID populated.
        """
        doc = ProjectDocument(name=name, description=description)
        await self.save(doc)
        return doc

    async def get_project(self, project_id: str) -> ProjectDocument | None:
        """Get a project by ID.

        Args:
            project_id: The project ID.

        Returns:
            The ProjectDocument if found, None otherwise (also for malformed IDs).
        """
        if not ObjectId.is_valid(project_id):
            return None
        return await self.find_one_by_id(ObjectId(project_id))

    async def list_projects(self) -> list[ProjectDocument]:
        """List all projects, newest first."""
        projects = await self.find_by({})
        return sorted(projects, key=lambda p: p.created_at, reverse=True)

    async def delete_project(self, project_id: str) -> bool:
        """Delete a project by ID.

        Returns:
            True if deleted, False if not found.
        """
        doc = await self.get_project(project_id)
        if doc is None:
            return False
        await self.delete(doc)
        return True

    async def get_timeline(self, project_id: str) -> TimelineModel | None:
        """Load a project's timeline."""
        doc = await self.get_project(project_id)
        if doc is None:
            return None
        return doc.load_timeline()

    async def save_timeline(
        self,
        project_id: str,
        timeline: TimelineModel,
    ) -> ProjectDocument | None:
        """Persist a project's timeline.

        Returns:
            The updated ProjectDocument if found, None otherwise.
        """
        doc = await self.get_project(project_id)
        if doc is None:
            return None

        doc.store_timeline(timeline)
        await self.save(doc)
        return doc

    async def save_analysis(
        self,
        project_id: str,
        analysis: AudioAnalysisResult,
        audio_filename: str | None = None,
    ) -> ProjectDocument | None:
        """Persist a new analysis; the scenes are kept.

        Returns:
            The updated ProjectDocument if found, None otherwise.
        """
        doc = await self.get_project(project_id)
        if doc is None:
            return None

        doc.store_analysis(analysis)
        if audio_filename is not None:
            doc.audio_filename = audio_filename
        await self.save(doc)
        return doc
