import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ats_server.db.base import Base
from ats_server.models.types import JsonB


class Job(Base):
    """A job posting tracked by a user."""

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_title: Mapped[str] = mapped_column(String(255), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    experience_level: Mapped[str | None] = mapped_column(String(30), nullable=True)
    required_skills: Mapped[list | None] = mapped_column(JsonB, nullable=True)  # ["Python", "SQL"]
    preferred_skills: Mapped[list | None] = mapped_column(JsonB, nullable=True)
    job_status: Mapped[str] = mapped_column(String(30), default="Interested")  # Interested | Applied | Interview | ...
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
