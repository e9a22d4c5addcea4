from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from skillgap.schemas.skills import ExtractedJobSkills, Skill


class JobDescriptionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    company: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=10, max_length=5000)

    model_config = ConfigDict(str_strip_whitespace=True)


class JobDescriptionRead(BaseModel):
    id: str
    title: str
    company: str
    description: str
    required_skills: list[Skill] = Field(default_factory=list)
    preferred_skills: list[Skill] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class JobDescriptionResponse(BaseModel):
    job_description: JobDescriptionRead
    extracted_skills: ExtractedJobSkills | None = None


class JobDescriptionAnalyzeRequest(BaseModel):
    job_description_id: str = Field(min_length=1)
    description: str = Field(min_length=1)


class SkillComparisonCounts(BaseModel):
    total_required: int
    total_current: int
    matching_skills: list[Skill] = Field(default_factory=list)


class SkillComparisonResponse(BaseModel):
    current_skills: list[Skill] = Field(default_factory=list)
    required_skills: list[Skill] = Field(default_factory=list)
    comparison: SkillComparisonCounts
