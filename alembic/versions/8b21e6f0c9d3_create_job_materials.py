"""create job_materials table

Revision ID: 8b21e6f0c9d3
Revises: 3f9c2a7d1b40
Create Date: 2026-10-17 15:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB, UUID

revision: str = "8b21e6f0c9d3"
down_revision: str | None = "3f9c2a7d1b40"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "job_materials",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
        ),
        sa.Column("job_id", sa.Integer(), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column(
            "resume_artifact_id", UUID(as_uuid=True), sa.ForeignKey("ai_artifacts.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column(
            "cover_artifact_id", UUID(as_uuid=True), sa.ForeignKey("ai_artifacts.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("metadata", JSONB(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("job_materials")
