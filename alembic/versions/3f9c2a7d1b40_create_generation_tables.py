"""create profiles, skills, jobs and ai_artifacts tables

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision: str = "3f9c2a7d1b40"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # =========================================================
    # 1. Candidate data read by the generation service
    # =========================================================
    op.create_table(
        "profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("first_name", sa.String(255), nullable=False),
        sa.Column("last_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("professional_title", sa.String(255), nullable=True),
        sa.Column("summary", sa.Text(), nullable=True),
        sa.Column("experience_level", sa.String(30), nullable=True),
        sa.Column("industry", sa.String(255), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("state", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "skills",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("skill_name", sa.String(255), nullable=False),
        sa.Column("proficiency_level", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column("skill_category", sa.String(20), nullable=False, server_default="Technical"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("job_title", sa.String(255), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("job_description", sa.Text(), nullable=True),
        sa.Column("industry", sa.String(255), nullable=True),
        sa.Column("experience_level", sa.String(30), nullable=True),
        sa.Column("required_skills", JSONB(), nullable=True),
        sa.Column("preferred_skills", JSONB(), nullable=True),
        sa.Column("job_status", sa.String(30), nullable=False, server_default="Interested"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    # =========================================================
    # 2. Generation artifacts
    # =========================================================
    op.create_table(
        "ai_artifacts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("title", sa.String(255), nullable=True),
        sa.Column("prompt", sa.Text(), nullable=True),
        sa.Column("model", sa.String(100), nullable=True),
        sa.Column("content", JSONB(), nullable=True),
        sa.Column("metadata", JSONB(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "kind IN ('resume', 'cover_letter', 'skills_optimization', 'company_research', 'match')",
            name="ck_ai_artifacts_kind",
        ),
    )
    op.create_index("ix_ai_artifacts_user_kind_created", "ai_artifacts", ["user_id", "kind", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_ai_artifacts_user_kind_created", table_name="ai_artifacts")
    op.drop_table("ai_artifacts")
    op.drop_table("jobs")
    op.drop_table("skills")
    op.drop_table("profiles")
