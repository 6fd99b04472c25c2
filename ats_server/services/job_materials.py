"""Job materials: which generated resume / cover letter a user attached to a job."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ats_server.core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from ats_server.gateway.types import GenerationKind
from ats_server.models import Job, JobMaterial
from ats_server.schemas.job_material import JobMaterialCreate
from ats_server.services import artifact_repository

logger = logging.getLogger(__name__)


async def _check_artifact(
    db: AsyncSession, user_id: uuid.UUID, artifact_id: uuid.UUID, kind: GenerationKind, label: str
) -> None:
    artifact = await artifact_repository.get_for_user(db, artifact_id, user_id)
    if artifact is None:
        raise NotFoundError(f"{label} artifact not found")
    if artifact.kind != kind.value:
        raise BadRequestError(f"{label}_artifact_id must point to kind={kind.value}")


async def create_job_material(db: AsyncSession, user_id: uuid.UUID, body: JobMaterialCreate) -> JobMaterial:
    """Validate ownership and artifact kinds, then insert a job_materials row."""
    if body.resume_artifact_id is None and body.cover_artifact_id is None:
        raise BadRequestError("At least one of resume_artifact_id or cover_artifact_id must be provided")

    job = await db.get(Job, body.job_id)
    if job is None:
        raise NotFoundError("Job not found")
    if job.user_id != user_id:
        raise ForbiddenError("Job does not belong to user")

    if body.resume_artifact_id is not None:
        await _check_artifact(db, user_id, body.resume_artifact_id, GenerationKind.RESUME, "resume")
    if body.cover_artifact_id is not None:
        await _check_artifact(db, user_id, body.cover_artifact_id, GenerationKind.COVER_LETTER, "cover")

    material = JobMaterial(
        user_id=user_id,
        job_id=body.job_id,
        resume_artifact_id=body.resume_artifact_id,
        cover_artifact_id=body.cover_artifact_id,
        meta=body.metadata,
    )
    db.add(material)
    await db.flush()
    logger.info("Job materials created", extra={"user_id": str(user_id), "job_id": body.job_id})
    return material


async def list_for_job(db: AsyncSession, user_id: uuid.UUID, job_id: int, limit: int = 10) -> list[JobMaterial]:
    """Newest first; rows of other users are never returned."""
    result = await db.execute(
        select(JobMaterial)
        .where(JobMaterial.user_id == user_id, JobMaterial.job_id == job_id)
        .order_by(JobMaterial.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
