"""Queries over ai_artifacts. Every read is scoped to the owning user."""

from __future__ import annotations

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ats_server.models import AiArtifact


async def list_artifacts(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    kind: str | None = None,
    job_id: int | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[AiArtifact], int]:
    """Newest first. Returns (page, total matching rows)."""
    filters = [AiArtifact.user_id == user_id]
    if kind:
        filters.append(AiArtifact.kind == kind)
    if job_id is not None:
        filters.append(AiArtifact.job_id == job_id)

    count_result = await db.execute(select(func.count()).select_from(AiArtifact).where(*filters))
    total = count_result.scalar() or 0

    result = await db.execute(
        select(AiArtifact).where(*filters).order_by(AiArtifact.created_at.desc()).limit(limit).offset(offset)
    )
    return list(result.scalars().all()), total


async def get_for_user(db: AsyncSession, artifact_id: uuid.UUID, user_id: uuid.UUID) -> AiArtifact | None:
    result = await db.execute(
        select(AiArtifact).where(AiArtifact.id == artifact_id, AiArtifact.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def latest_for_job(db: AsyncSession, user_id: uuid.UUID, job_id: int, kind: str) -> AiArtifact | None:
    result = await db.execute(
        select(AiArtifact)
        .where(AiArtifact.user_id == user_id, AiArtifact.job_id == job_id, AiArtifact.kind == kind)
        .order_by(AiArtifact.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
