"""Scene timeline routes: ingestion, edits, render and export."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from cadence.api.schemas.requests import (
    MediaResultRequest,
    RenderRequest,
    ReorderScenesRequest,
    ReplaceScenesRequest,
    ResizeSceneRequest,
    SplitSceneRequest,
    UpdateSceneRequest,
)
from cadence.api.schemas.responses import EditResponse, RenderResponse, TimelineResponse
from cadence.mongodb.repositories import ProjectRepository
from cadence.timeline.model import EditResult, TimelineModel
from cadence.timeline.render import render_timeline
from cadence.timeline.viewport import Viewport
from cadence.timeline_exporter.providers import timeline_exporter_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(project_id: str, timeline: TimelineModel) -> TimelineResponse:
    """Convert TimelineModel to TimelineResponse."""
    return TimelineResponse(
        project_id=project_id,
        scenes=timeline.scenes,
        total_duration_seconds=timeline.total_duration_seconds,
        is_chronological=timeline.is_chronological,
        analysis=timeline.analysis,
    )


async def _load(repo: ProjectRepository, project_id: str) -> TimelineModel:
    timeline = await repo.get_timeline(project_id)
    if timeline is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return timeline


async def _commit(repo: ProjectRepository, project_id: str, result: EditResult) -> EditResponse:
    """Persist an applied edit and report its outcome."""
    if result.applied:
        await repo.save_timeline(project_id, result.timeline)
    logger.info("[project=%s] Edit outcome: %s", project_id, result.outcome)
    return EditResponse(outcome=result.outcome, timeline=_to_response(project_id, result.timeline))


@router.get("/{project_id}/timeline", response_model=TimelineResponse)
async def get_timeline(project_id: str) -> TimelineResponse:
    """Get a project's timeline."""
    repo = ProjectRepository.create()
    return _to_response(project_id, await _load(repo, project_id))


@router.put("/{project_id}/scenes", response_model=TimelineResponse)
async def replace_scenes(project_id: str, request: ReplaceScenesRequest) -> TimelineResponse:
    """Replace all scenes with normalized planner/wire descriptors."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)

    updated = TimelineModel.from_raw_scenes(request.scenes, analysis=timeline.analysis)
    await repo.save_timeline(project_id, updated)
    logger.info("[project=%s] Replaced scenes: %d scenes", project_id, len(updated.scenes))
    return _to_response(project_id, updated)


@router.post("/{project_id}/scenes/{index}/split", response_model=EditResponse)
async def split_scene(project_id: str, index: int, request: SplitSceneRequest) -> EditResponse:
    """Split a scene at a time strictly inside it."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    return await _commit(repo, project_id, timeline.split(index, request.at_seconds))


@router.post("/{project_id}/scenes/{index}/resize", response_model=EditResponse)
async def resize_scene(project_id: str, index: int, request: ResizeSceneRequest) -> EditResponse:
    """Move a scene's start or end edge."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    return await _commit(
        repo, project_id, timeline.resize(index, request.edge, request.new_time_seconds)
    )


@router.post("/{project_id}/scenes/reorder", response_model=EditResponse)
async def reorder_scenes(project_id: str, request: ReorderScenesRequest) -> EditResponse:
    """Move a scene to a new position in the sequence."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    return await _commit(repo, project_id, timeline.reorder(request.from_index, request.to_index))


@router.delete("/{project_id}/scenes/{index}", response_model=EditResponse)
async def delete_scene(project_id: str, index: int) -> EditResponse:
    """Remove a scene."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    return await _commit(repo, project_id, timeline.delete(index))


@router.patch("/{project_id}/scenes/{index}", response_model=EditResponse)
async def update_scene(project_id: str, index: int, request: UpdateSceneRequest) -> EditResponse:
    """Edit a scene's descriptive fields."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    changes = request.model_dump(exclude_unset=True)
    return await _commit(repo, project_id, timeline.update_scene(index, **changes))


@router.post("/{project_id}/scenes/{index}/generating", response_model=EditResponse)
async def mark_scene_generating(project_id: str, index: int) -> EditResponse:
    """Flag a scene's media as being generated."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    return await _commit(repo, project_id, timeline.mark_generating(index))


@router.post("/{project_id}/scenes/{index}/media", response_model=EditResponse)
async def record_media_result(
    project_id: str,
    index: int,
    request: MediaResultRequest,
) -> EditResponse:
    """Record the media pipeline's result for a scene."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)
    return await _commit(
        repo, project_id, timeline.apply_media_result(index, request.media_ref, request.error)
    )


@router.post("/{project_id}/render", response_model=RenderResponse)
async def render(project_id: str, request: RenderRequest) -> RenderResponse:
    """Derive draw commands for a canvas of the requested size."""
    repo = ProjectRepository.create()
    timeline = await _load(repo, project_id)

    viewport = Viewport(
        duration_seconds=timeline.total_duration_seconds,
        zoom=request.zoom,
        current_time=request.current_time,
    )
    commands = render_timeline(timeline, viewport, request.width_px, request.height_px)
    return RenderResponse(
        view_start_seconds=viewport.view_start,
        view_end_seconds=viewport.view_end,
        commands=commands,
    )


@router.get("/{project_id}/export")
async def export_otio(project_id: str, audio_url: str | None = None) -> Response:
    """Download the timeline as an OpenTimelineIO file."""
    repo = ProjectRepository.create()
    project = await repo.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")

    content = timeline_exporter_service().write_to_string(
        project.load_timeline(),
        name=project.name,
        audio_url=audio_url,
    )
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="cadence_{project_id}.otio"'},
    )
