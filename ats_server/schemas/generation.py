"""Request/response schemas for the AI generation endpoints.

Request bodies use the camelCase field names the web client sends
(``jobId``, ``companyName``); snake_case is accepted too.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class GenerationOptions(BaseModel):
    """Optional knobs a client may pass along with a generation request."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    tone: str | None = Field(None, max_length=50, description="e.g. professional, enthusiastic")
    focus: str | None = Field(None, max_length=200, description="What the output should emphasise")
    variant: str | None = Field(None, max_length=50, description="Caller-defined label stored in metadata")
    model: str | None = Field(None, max_length=100, description="Model override, honoured only if allow-listed")
    prompt: str | None = Field(
        None, max_length=2000, description="Free-form additions appended under 'User Additions'"
    )


class GenerateRequest(BaseModel):
    """Body for resume / cover-letter / skills-optimization generation."""

    model_config = ConfigDict(populate_by_name=True)

    job_id: int = Field(..., alias="jobId", gt=0)
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class CompanyResearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(..., alias="companyName", min_length=1, max_length=255)
    job_id: int | None = Field(None, alias="jobId", gt=0)
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class JobMatchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_id: int = Field(..., alias="jobId", gt=0)


class GenerationResponse(BaseModel):
    """A freshly generated artifact."""

    id: UUID | None  # None when persistence failed
    kind: str
    created_at: datetime
    preview: str
    content: Any
    persisted: bool
    metadata: dict[str, Any]


class MatchBreakdown(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    skills: int = 0
    experience: int = 0
    education: int = 0
    cultural_fit: int = Field(0, alias="culturalFit")


class MatchArtifactRef(BaseModel):
    id: UUID | None
    cached: bool


class MatchMeta(BaseModel):
    latency_ms: int
    cached: bool


class JobMatchResponse(BaseModel):
    """Job match analysis; serialized with camelCase keys (``by_alias``)."""

    model_config = ConfigDict(populate_by_name=True)

    match_score: int = Field(..., alias="matchScore")
    breakdown: MatchBreakdown
    skills_gaps: list[str] = Field(default_factory=list, alias="skillsGaps")
    strengths: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    reasoning: str = ""
    artifact: MatchArtifactRef
    meta: MatchMeta
