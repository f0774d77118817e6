"""Project management and audio analysis routes."""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile

from cadence.api.schemas.requests import CreateProjectRequest
from cadence.api.schemas.responses import AnalysisResponse, ProjectResponse
from cadence.audio_analyzer.decoder import AudioDecodeError
from cadence.mongodb.repositories import ProjectRepository
from cadence.mongodb.schemas import ProjectDocument
from cadence.pipeline.analysis_runner import discard_analysis_runner, get_analysis_runner
from cadence.planner.context import build_planner_context
from cadence.planner.schemas import PlannerAudioContext, SyncMode

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(doc: ProjectDocument) -> ProjectResponse:
    """Convert ProjectDocument to ProjectResponse."""
    return ProjectResponse(
        id=str(doc.id),
        name=doc.name,
        description=doc.description,
        audio_filename=doc.audio_filename,
        audio_duration_seconds=doc.audio_duration_seconds,
        scene_count=doc.scene_count,
        has_analysis=doc.analysis_json is not None,
        created_at=doc.created_at,
        updated_at=doc.updated_at,
    )


@router.post("", response_model=ProjectResponse)
async def create_project(request: CreateProjectRequest) -> ProjectResponse:
    """Create a new project."""
    repo = ProjectRepository.create()
    doc = await repo.create_project(name=request.name, description=request.description)
    logger.info("[project=%s] Created project %r", doc.id, doc.name)
    return _to_response(doc)


@router.get("", response_model=list[ProjectResponse])
async def list_projects() -> list[ProjectResponse]:
    """List all projects."""
    repo = ProjectRepository.create()
    docs = await repo.list_projects()
    return [_to_response(doc) for doc in docs]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str) -> ProjectResponse:
    """Get a project by ID."""
    repo = ProjectRepository.create()
    doc = await repo.get_project(project_id)
    if doc is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return _to_response(doc)


@router.delete("/{project_id}")
async def delete_project(project_id: str) -> dict[str, str]:
    """Delete a project and cancel its analysis."""
    repo = ProjectRepository.create()
    deleted = await repo.delete_project(project_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Project not found")
    discard_analysis_runner(project_id)
    return {"status": "deleted", "project_id": project_id}


@router.post("/{project_id}/audio", response_model=AnalysisResponse)
async def upload_audio(
    project_id: str,
    file: UploadFile = File(...),
) -> AnalysisResponse:
    """Upload a music track and analyze it.

    A newer upload for the same project supersedes this one; the superseded
    request gets a 409 and its result is never stored.
    """
    repo = ProjectRepository.create()
    project = await repo.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")

    contents = await file.read()
    runner = get_analysis_runner(project_id)

    try:
        analysis = await runner.run(contents)
    except AudioDecodeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    if analysis is None:
        raise HTTPException(status_code=409, detail="Analysis superseded by a newer request")
    generation = runner.generation

    await repo.save_analysis(project_id, analysis, audio_filename=file.filename)
    logger.info(
        "[project=%s] Stored analysis for %s (%.2fs)",
        project_id,
        file.filename or "upload",
        analysis.duration_seconds,
    )
    return AnalysisResponse(project_id=project_id, generation=generation, analysis=analysis)


@router.post("/{project_id}/audio/cancel")
async def cancel_analysis(project_id: str) -> dict[str, str]:
    """Cancel the project's in-flight analysis, if any."""
    repo = ProjectRepository.create()
    if await repo.get_project(project_id) is None:
        raise HTTPException(status_code=404, detail="Project not found")

    get_analysis_runner(project_id).cancel()
    return {"status": "cancelled", "project_id": project_id}


@router.get("/{project_id}/planner-context", response_model=PlannerAudioContext)
async def get_planner_context(
    project_id: str,
    sync_mode: SyncMode = SyncMode.MIXED,
) -> PlannerAudioContext:
    """Audio context to hand to the external scene planner."""
    repo = ProjectRepository.create()
    project = await repo.get_project(project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")

    analysis = project.load_analysis()
    if analysis is None:
        raise HTTPException(status_code=400, detail="No audio analyzed for project")
    return build_planner_context(analysis, sync_mode)
