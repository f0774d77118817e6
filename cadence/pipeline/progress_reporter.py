"""WebSocket connection manager and progress reporter."""

import asyncio
import logging

from fastapi import WebSocket

from cadence.api.schemas.websocket import AnalysisStage, ProgressMessage

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks the WebSocket clients watching each project."""

    def __init__(self) -> None:
        self.active_connections: dict[str, list[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, project_id: str) -> None:
        """Accept a client and start sending it the project's progress."""
        await websocket.accept()
        watchers = self.active_connections.setdefault(project_id, [])
        watchers.append(websocket)
        logger.info("[ws] Client connected for project=%s (total: %d)", project_id, len(watchers))

    def disconnect(self, websocket: WebSocket, project_id: str) -> None:
        watchers = self.active_connections.get(project_id, [])
        if websocket in watchers:
            watchers.remove(websocket)
        if not watchers:
            self.active_connections.pop(project_id, None)

    async def broadcast(self, project_id: str, message: ProgressMessage) -> None:
        """Send a message to every client of a project.

        Clients whose send fails are dropped.
        """
        watchers = list(self.active_connections.get(project_id, []))
        if not watchers:
            return

        payload = message.model_dump(mode="json")
        results = await asyncio.gather(
            *(ws.send_json(payload) for ws in watchers),
            return_exceptions=True,
        )
        for ws, result in zip(watchers, results, strict=True):
            if isinstance(result, Exception):
                logger.debug("[ws] Dropping client for project=%s: %s", project_id, result)
                self.disconnect(ws, project_id)


# Global instance
connection_manager = ConnectionManager()


class ProgressReporter:
    """Reports analysis progress to WebSocket clients."""

    def __init__(self, project_id: str) -> None:
        """Initialize the progress reporter.

        Args:
            project_id: The project ID.
        """
        self.project_id = project_id

    async def send_progress(
        self,
        stage: AnalysisStage,
        progress_percent: float,
        generation: int = 0,
        message: str = "",
    ) -> None:
        """Send a progress update to connected clients.

        Args:
            stage: Current analysis stage.
            progress_percent: Overall progress percentage (0-100).
            generation: Analysis generation the update belongs to.
            message: Optional status message.
        """
        logger.info(
            "[project=%s] PROGRESS: gen=%d, stage=%s, percent=%.1f%%, message=%s",
            self.project_id,
            generation,
            stage.value,
            progress_percent,
            message or "-",
        )

        msg = ProgressMessage(
            project_id=self.project_id,
            generation=generation,
            stage=stage,
            progress_percent=progress_percent,
            message=message,
        )
        await connection_manager.broadcast(self.project_id, msg)

    async def send_complete(self, generation: int = 0) -> None:
        """Send completion notification."""
        await self.send_progress(
            stage=AnalysisStage.COMPLETED,
            progress_percent=100.0,
            generation=generation,
            message="Analysis complete",
        )

    async def send_cancelled(self, generation: int = 0) -> None:
        """Send notification that a run was superseded or cancelled."""
        await self.send_progress(
            stage=AnalysisStage.CANCELLED,
            progress_percent=0.0,
            generation=generation,
            message="Analysis superseded",
        )

    async def send_error(self, error_message: str, generation: int = 0) -> None:
        """Send error notification."""
        await self.send_progress(
            stage=AnalysisStage.FAILED,
            progress_percent=0.0,
            generation=generation,
            message=error_message,
        )
