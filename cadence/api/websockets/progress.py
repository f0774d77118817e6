"""WebSocket handler for real-time analysis progress."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from cadence.pipeline.progress_reporter import connection_manager

router = APIRouter()


@router.websocket("/{project_id}")
async def websocket_endpoint(websocket: WebSocket, project_id: str) -> None:
    """WebSocket endpoint for real-time progress updates."""
    await connection_manager.connect(websocket, project_id)
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket, project_id)
