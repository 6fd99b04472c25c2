"""Generation orchestration: load context, build prompt, call the gateway, persist.

Pure-function architecture like ``content.py``; the route handlers pass in
the request-scoped session and the application's gateway instance.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ats_server.core.config import settings
from ats_server.core.exceptions import ForbiddenError, NotFoundError, ServiceUnavailableError, UpstreamError
from ats_server.core.metrics import GENERATIONS
from ats_server.gateway.gateway import AiGateway
from ats_server.gateway.normalizer import result_payload
from ats_server.gateway.types import ErrorKind, GatewayError, GenerateOptions, GenerateResult, GenerationKind
from ats_server.models import AiArtifact, Job, Profile, Skill
from ats_server.prompts import builders
from ats_server.prompts.sanitize import sanitize_prompt, select_model, validate_prompt
from ats_server.schemas.generation import (
    CompanyResearchRequest,
    GenerateRequest,
    GenerationOptions,
    GenerationResponse,
    JobMatchResponse,
)
from ats_server.services import artifact_repository
from ats_server.services.content import make_preview, normalize_match, sanitize_resume_content

logger = logging.getLogger(__name__)

STORED_PROMPT_CHARS = 2000
PROMPT_PREVIEW_CHARS = 400
MATCH_MAX_TOKENS = 1500

_TITLES = {
    GenerationKind.RESUME: "AI Resume for {}",
    GenerationKind.COVER_LETTER: "Cover Letter for {}",
    GenerationKind.SKILLS_OPTIMIZATION: "Skills Optimization for {}",
    GenerationKind.COMPANY_RESEARCH: "Company Research: {}",
    GenerationKind.MATCH: "Job Match: {}",
}

_JOB_BUILDERS = {
    GenerationKind.RESUME: builders.build_resume_prompt,
    GenerationKind.COVER_LETTER: builders.build_cover_letter_prompt,
    GenerationKind.SKILLS_OPTIMIZATION: builders.build_skills_optimization_prompt,
}


@dataclass
class GenerationContext:
    profile: Profile
    skills: list[Skill]
    job: Job | None


@dataclass
class PersistOutcome:
    artifact_id: uuid.UUID | None
    created_at: datetime
    persisted: bool


# ── Loading ──────────────────────────────────────────────────────


async def load_context(db: AsyncSession, user_id: uuid.UUID, job_id: int | None) -> GenerationContext:
    """Profile (404 if missing), owned job (404/403) and skills for a user."""
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise NotFoundError("Profile not found")

    job = None
    if job_id is not None:
        job = await db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found")
        if job.user_id != user_id:
            raise ForbiddenError("Job does not belong to user")

    result = await db.execute(select(Skill).where(Skill.user_id == user_id).order_by(Skill.created_at))
    return GenerationContext(profile=profile, skills=list(result.scalars().all()), job=job)


# ── Gateway call ─────────────────────────────────────────────────


def prepare_prompt(raw_prompt: str, options: GenerationOptions | None = None) -> str:
    """Append user additions, sanitise, then reject prompts that are effectively empty."""
    if options is not None:
        raw_prompt = builders.with_user_additions(raw_prompt, options)
    return validate_prompt(sanitize_prompt(raw_prompt, settings.prompt_max_chars))


async def call_gateway(
    gateway: AiGateway,
    kind: GenerationKind,
    prompt: str,
    options: GenerateOptions,
) -> GenerateResult:
    """Run the gateway, translating its failures into HTTP errors (503 config, 502 otherwise)."""
    try:
        return await gateway.generate(kind.value, prompt, options)
    except GatewayError as e:
        GENERATIONS.labels(kind=kind.value, status="fail").inc()
        if e.kind is ErrorKind.CONFIGURATION:
            logger.error("AI provider misconfigured: %s", e)
            raise ServiceUnavailableError(str(e)) from e
        logger.warning(
            "AI generation failed (kind=%s, error=%s, attempts=%d): %s",
            kind.value,
            e.kind.value,
            e.attempts,
            e,
            extra={"kind": kind.value},
        )
        raise UpstreamError(f"AI generation failed: {e}") from e


# ── Persistence ──────────────────────────────────────────────────


async def persist_artifact(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    job_id: int | None,
    kind: GenerationKind,
    title: str,
    prompt: str,
    model: str | None,
    content: Any,
    meta: dict[str, Any],
) -> PersistOutcome:
    """Insert an ai_artifacts row. Best-effort: a database failure is logged, never raised."""
    created_at = datetime.now(timezone.utc)
    artifact = AiArtifact(
        id=uuid.uuid4(),
        user_id=user_id,
        job_id=job_id,
        kind=kind.value,
        title=title[:255],
        prompt=prompt[:STORED_PROMPT_CHARS],
        model=model,
        content=content,
        meta=meta,
        created_at=created_at,
        updated_at=created_at,
    )
    try:
        db.add(artifact)
        await db.flush()
        await db.commit()
    except SQLAlchemyError:
        logger.exception("Failed to persist %s artifact", kind.value, extra={"user_id": str(user_id), "kind": kind.value})
        await db.rollback()
        return PersistOutcome(artifact_id=None, created_at=created_at, persisted=False)
    return PersistOutcome(artifact_id=artifact.id, created_at=created_at, persisted=True)


# ── Public operations ────────────────────────────────────────────


async def _generate(
    db: AsyncSession,
    gateway: AiGateway,
    *,
    kind: GenerationKind,
    user_id: uuid.UUID,
    job_id: int | None,
    title_subject: str,
    raw_prompt: str,
    options: GenerationOptions,
) -> GenerationResponse:
    prompt = prepare_prompt(raw_prompt, options)
    model = select_model(options.model, settings.ai_model, settings.allowed_ai_model_list)

    start = time.monotonic()
    result = await call_gateway(gateway, kind, prompt, GenerateOptions(model=model))
    latency_ms = int((time.monotonic() - start) * 1000)

    content = result_payload(result)
    if kind is GenerationKind.RESUME:
        content = sanitize_resume_content(content)

    meta: dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "provider": result.meta.get("provider", gateway.provider_name),
        "model": result.meta.get("model", model),
        "tokens": result.tokens,
        "attempts": result.meta.get("attempts", 1),
        "prompt_preview": prompt[:PROMPT_PREVIEW_CHARS],
        "latency_ms": latency_ms,
    }
    if options.variant:
        meta["variant"] = options.variant

    outcome = await persist_artifact(
        db,
        user_id=user_id,
        job_id=job_id,
        kind=kind,
        title=_TITLES[kind].format(title_subject),
        prompt=prompt,
        model=meta["model"],
        content=content,
        meta=meta,
    )
    GENERATIONS.labels(kind=kind.value, status="success").inc()
    logger.info(
        "Generated %s artifact (persisted=%s, %dms)",
        kind.value,
        outcome.persisted,
        latency_ms,
        extra={"user_id": str(user_id), "job_id": job_id, "kind": kind.value, "latency_ms": latency_ms},
    )

    return GenerationResponse(
        id=outcome.artifact_id,
        kind=kind.value,
        created_at=outcome.created_at,
        preview=make_preview(content),
        content=content,
        persisted=outcome.persisted,
        metadata={
            **meta,
            "persisted": outcome.persisted,
            "artifact_id": str(outcome.artifact_id) if outcome.artifact_id else None,
        },
    )


async def generate_for_job(
    db: AsyncSession,
    gateway: AiGateway,
    kind: GenerationKind,
    user_id: uuid.UUID,
    body: GenerateRequest,
) -> GenerationResponse:
    """Resume, cover letter or skills optimization for one of the user's jobs."""
    ctx = await load_context(db, user_id, body.job_id)
    raw_prompt = _JOB_BUILDERS[kind](ctx.profile, ctx.skills, ctx.job, body.options)
    return await _generate(
        db,
        gateway,
        kind=kind,
        user_id=user_id,
        job_id=body.job_id,
        title_subject=ctx.job.job_title,
        raw_prompt=raw_prompt,
        options=body.options,
    )


async def research_company(
    db: AsyncSession,
    gateway: AiGateway,
    user_id: uuid.UUID,
    body: CompanyResearchRequest,
) -> GenerationResponse:
    ctx = await load_context(db, user_id, body.job_id)
    raw_prompt = builders.build_company_research_prompt(body.company_name, ctx.job, body.options)
    return await _generate(
        db,
        gateway,
        kind=GenerationKind.COMPANY_RESEARCH,
        user_id=user_id,
        job_id=body.job_id,
        title_subject=body.company_name,
        raw_prompt=raw_prompt,
        options=body.options,
    )


async def match_job(
    db: AsyncSession,
    gateway: AiGateway,
    user_id: uuid.UUID,
    job_id: int,
) -> JobMatchResponse:
    """Job match analysis. An existing match artifact for the job is returned without a provider call."""
    start = time.monotonic()
    kind = GenerationKind.MATCH
    ctx = await load_context(db, user_id, job_id)

    cached = await artifact_repository.latest_for_job(db, user_id, job_id, kind.value)
    if cached is not None:
        GENERATIONS.labels(kind=kind.value, status="cached").inc()
        analysis = normalize_match(cached.content)
        return _match_response(analysis, cached.id, cached=True, latency_ms=int((time.monotonic() - start) * 1000))

    prompt = prepare_prompt(builders.build_job_match_prompt(ctx.profile, ctx.skills, ctx.job))
    job_title = ctx.job.job_title
    result = await call_gateway(gateway, kind, prompt, GenerateOptions(max_tokens=MATCH_MAX_TOKENS))
    analysis = normalize_match(result_payload(result))
    latency_ms = int((time.monotonic() - start) * 1000)

    outcome = await persist_artifact(
        db,
        user_id=user_id,
        job_id=job_id,
        kind=kind,
        title=_TITLES[kind].format(job_title),
        prompt=prompt,
        model=result.meta.get("model"),
        content=analysis,
        meta={
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "provider": result.meta.get("provider", gateway.provider_name),
            "tokens": result.tokens,
            "latency_ms": latency_ms,
        },
    )
    GENERATIONS.labels(kind=kind.value, status="success").inc()
    return _match_response(analysis, outcome.artifact_id, cached=False, latency_ms=latency_ms)


def _match_response(analysis: dict, artifact_id: uuid.UUID | None, *, cached: bool, latency_ms: int) -> JobMatchResponse:
    return JobMatchResponse(
        match_score=analysis["matchScore"],
        breakdown={**analysis["breakdown"]},
        skills_gaps=analysis["skillsGaps"],
        strengths=analysis["strengths"],
        recommendations=analysis["recommendations"],
        reasoning=analysis["reasoning"],
        artifact={"id": artifact_id, "cached": cached},
        meta={"latency_ms": latency_ms, "cached": cached},
    )
