from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from skillgap.schemas.skills import GapSize, SkillGap


PathResourceType = Literal["course", "book", "video", "article", "project"]
PathDifficulty = Literal["beginner", "intermediate", "advanced"]
PathCost = Literal["free", "paid", "freemium"]

CatalogResourceType = Literal["course", "tutorial", "book", "video", "documentation", "practice", "certification"]
CatalogDifficulty = Literal["beginner", "intermediate", "advanced", "expert"]
CatalogCost = Literal["free", "paid", "subscription", "one_time"]


# --- learning paths -------------------------------------------------------


class PathResource(BaseModel):
    id: str
    title: str
    type: PathResourceType = "course"
    url: str = ""
    difficulty: PathDifficulty = "beginner"
    estimated_hours: int = 10
    cost: PathCost = "free"


class PathPlan(BaseModel):
    resources: list[PathResource] = Field(default_factory=list)
    estimated_timeline: int
    priority_order: list[str] = Field(default_factory=list)
    learning_strategy: str = ""


class LearningGapInput(SkillGap):
    """A gap submitted for planning: it must name a skill and actually be a gap."""

    @field_validator("skill")
    @classmethod
    def _require_skill_name(cls, v):
        if not v.name:
            raise ValueError("Skill name is required")
        return v

    @field_validator("gap")
    @classmethod
    def _reject_none_gap(cls, v: GapSize) -> GapSize:
        if v == GapSize.NONE:
            raise ValueError("Valid gap size is required")
        return v


class GeneratePathRequest(BaseModel):
    skill_gaps: list[LearningGapInput]
    preferences: dict[str, Any] | None = None


class RegeneratePathRequest(BaseModel):
    preferences: dict[str, Any] | None = None


class ProgressUpdate(BaseModel):
    completed_resources: list[str] | None = None
    current_skill: str | None = None
    notes: str | None = None


class LearningPathRead(BaseModel):
    id: str
    skill_gaps: list[SkillGap] = Field(default_factory=list)
    resources: list[PathResource] = Field(default_factory=list)
    estimated_timeline: int
    priority_order: list[str] = Field(default_factory=list)
    learning_strategy: str | None = None
    completed_resources: list[str] | None = None
    current_skill: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class GeneratePathResponse(BaseModel):
    learning_path: LearningPathRead
    ai_recommendations: PathPlan


class PathRecommendations(BaseModel):
    next_steps: list[str] = Field(default_factory=list)
    trending_skills: list[str] = Field(default_factory=list)
    learning_tips: list[str] = Field(default_factory=list)
    skill_focus: list[str] = Field(default_factory=list)


# --- resource catalog -----------------------------------------------------


class ResourceCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    type: CatalogResourceType
    url: HttpUrl
    difficulty: CatalogDifficulty = "beginner"
    estimated_hours: int = Field(default=10, ge=1, le=1000)
    cost: CatalogCost = "free"
    skills: list[str] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0, le=5)
    description: str | None = Field(default=None, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class ResourceUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    type: CatalogResourceType | None = None
    url: HttpUrl | None = None
    difficulty: CatalogDifficulty | None = None
    estimated_hours: int | None = Field(default=None, ge=1, le=1000)
    cost: CatalogCost | None = None
    skills: list[str] | None = None
    rating: float | None = Field(default=None, ge=0, le=5)
    description: str | None = Field(default=None, max_length=2000)

    model_config = ConfigDict(str_strip_whitespace=True)


class ResourceRead(BaseModel):
    id: str
    title: str
    type: str
    url: str
    difficulty: str
    estimated_hours: int
    cost: str
    skills: list[str] = Field(default_factory=list)
    rating: float
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ResourceCreateResponse(BaseModel):
    learning_resource: ResourceRead
    # Only set when skills were filled in by the model.
    extracted_skills: list[str] | None = None


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class ResourceListResponse(BaseModel):
    learning_resources: list[ResourceRead] = Field(default_factory=list)
    pagination: Pagination


class ResourcesResponse(BaseModel):
    resources: list[ResourceRead] = Field(default_factory=list)


class BySkillsRequest(BaseModel):
    skills: list[str] = Field(min_length=1)
    difficulty: CatalogDifficulty | None = None
    limit: int = Field(default=10, ge=1, le=100)


class BySkillsResponse(BaseModel):
    learning_resources: list[ResourceRead] = Field(default_factory=list)
    skills_queried: list[str] = Field(default_factory=list)


class ResourceRecommendationRequest(BaseModel):
    current_skills: list[str] = Field(default_factory=list)
    target_skills: list[str] = Field(min_length=1)
    difficulty: CatalogDifficulty = "beginner"
    limit: int = Field(default=5, ge=1, le=100)


class ResourceRecommendationResponse(BaseModel):
    learning_resources: list[ResourceRead] = Field(default_factory=list)
    skill_gaps: list[str] = Field(default_factory=list)
    current_skills: list[str] = Field(default_factory=list)
    target_skills: list[str] = Field(default_factory=list)
    message: str | None = None


class ResourceAnalyzeRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: str = Field(min_length=1)


class ResourceAnalyzeResponse(BaseModel):
    extracted_skills: list[str] = Field(default_factory=list)
