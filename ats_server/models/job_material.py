import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ats_server.db.base import Base
from ats_server.models.types import JsonB


class JobMaterial(Base):
    """The resume and/or cover letter a user settled on for a job application."""

    __tablename__ = "job_materials"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_id: Mapped[int] = mapped_column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    resume_artifact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("ai_artifacts.id", ondelete="SET NULL"), nullable=True
    )
    cover_artifact_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("ai_artifacts.id", ondelete="SET NULL"), nullable=True
    )
    meta: Mapped[dict] = mapped_column("metadata", JsonB, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
