"""Attach generated artifacts to a job application."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ats_server.core.dependencies import get_current_user_id
from ats_server.db.postgres import get_db
from ats_server.schemas.job_material import (
    JobMaterialCreate,
    JobMaterialCreateResponse,
    JobMaterialListResponse,
    JobMaterialOut,
)
from ats_server.services import job_materials

router = APIRouter(prefix="/jobs", tags=["job-materials"])


@router.post("/materials", response_model=JobMaterialCreateResponse, status_code=201)
async def create_job_materials(
    body: JobMaterialCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Link a resume and/or cover letter artifact to one of the user's jobs."""
    material = await job_materials.create_job_material(db, user_id, body)
    return JobMaterialCreateResponse(material=JobMaterialOut.model_validate(material))


@router.get("/{job_id}/materials", response_model=JobMaterialListResponse)
async def list_job_materials(
    job_id: int,
    limit: int = Query(10, ge=1, le=100),
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    items = await job_materials.list_for_job(db, user_id, job_id, limit=limit)
    return JobMaterialListResponse(items=[JobMaterialOut.model_validate(m) for m in items])
