"""Schemas for linking generated artifacts to a job application."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class JobMaterialCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_id: int = Field(..., alias="jobId", gt=0)
    resume_artifact_id: UUID | None = None
    cover_artifact_id: UUID | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class JobMaterialOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: int
    resume_artifact_id: UUID | None
    cover_artifact_id: UUID | None
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias=AliasChoices("meta", "metadata"))
    created_at: datetime


class JobMaterialCreateResponse(BaseModel):
    material: JobMaterialOut


class JobMaterialListResponse(BaseModel):
    items: list[JobMaterialOut]
