"""Generation artifact read schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class ArtifactOut(BaseModel):
    id: UUID
    kind: str
    job_id: int | None
    title: str | None
    model: str | None
    content: Any
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("meta", "metadata"))
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ArtifactListResponse(BaseModel):
    items: list[ArtifactOut]
    total: int
