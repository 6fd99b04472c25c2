"""Generation artifact read endpoints (owner-scoped)."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ats_server.core.dependencies import get_current_user_id
from ats_server.core.exceptions import NotFoundError
from ats_server.db.postgres import get_db
from ats_server.gateway.types import GenerationKind
from ats_server.schemas.artifact import ArtifactListResponse, ArtifactOut
from ats_server.services import artifact_repository

router = APIRouter(prefix="/artifacts", tags=["artifacts"])


@router.get("", response_model=ArtifactListResponse)
async def list_artifacts(
    kind: GenerationKind | None = Query(None),
    job_id: int | None = Query(None, alias="jobId"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's artifacts, newest first."""
    items, total = await artifact_repository.list_artifacts(
        db,
        user_id,
        kind=kind.value if kind else None,
        job_id=job_id,
        limit=limit,
        offset=offset,
    )
    return ArtifactListResponse(items=[ArtifactOut.model_validate(a) for a in items], total=total)


@router.get("/{artifact_id}", response_model=ArtifactOut)
async def get_artifact(
    artifact_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    artifact = await artifact_repository.get_for_user(db, artifact_id, user_id)
    if not artifact:
        raise NotFoundError("Artifact not found")
    return ArtifactOut.model_validate(artifact)
