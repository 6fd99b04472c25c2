"""AI generation endpoints: every call is rate limited per user and endpoint."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ats_server.core.dependencies import get_current_user_id, get_gateway, rate_limit
from ats_server.db.postgres import get_db
from ats_server.gateway.gateway import AiGateway
from ats_server.gateway.types import GenerationKind
from ats_server.schemas.generation import (
    CompanyResearchRequest,
    GenerateRequest,
    GenerationResponse,
    JobMatchRequest,
    JobMatchResponse,
)
from ats_server.services import generation_service

router = APIRouter(prefix="/generate", tags=["generate"])


@router.post(
    "/resume",
    response_model=GenerationResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("generate-resume"))],
)
async def generate_resume(
    body: GenerateRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    gateway: AiGateway = Depends(get_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Tailor resume content (summary, bullets, skill ordering) to a job."""
    return await generation_service.generate_for_job(db, gateway, GenerationKind.RESUME, user_id, body)


@router.post(
    "/cover-letter",
    response_model=GenerationResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("generate-cover-letter"))],
)
async def generate_cover_letter(
    body: GenerateRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    gateway: AiGateway = Depends(get_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await generation_service.generate_for_job(db, gateway, GenerationKind.COVER_LETTER, user_id, body)


@router.post(
    "/skills-optimization",
    response_model=GenerationResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("generate-skills-optimization"))],
)
async def generate_skills_optimization(
    body: GenerateRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    gateway: AiGateway = Depends(get_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await generation_service.generate_for_job(
        db, gateway, GenerationKind.SKILLS_OPTIMIZATION, user_id, body
    )


@router.post(
    "/company-research",
    response_model=GenerationResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("generate-company-research"))],
)
async def generate_company_research(
    body: CompanyResearchRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    gateway: AiGateway = Depends(get_gateway),
    db: AsyncSession = Depends(get_db),
):
    return await generation_service.research_company(db, gateway, user_id, body)


@router.post(
    "/job-match",
    response_model=JobMatchResponse,
    dependencies=[Depends(rate_limit("generate-job-match"))],
)
async def generate_job_match(
    body: JobMatchRequest,
    user_id: uuid.UUID = Depends(get_current_user_id),
    gateway: AiGateway = Depends(get_gateway),
    db: AsyncSession = Depends(get_db),
):
    """Score the user against a job. Repeated calls return the stored analysis (``cached: true``)."""
    return await generation_service.match_job(db, gateway, user_id, body.job_id)
