from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from skillgap.schemas.skills import GapAnalysisResult, OverallGap, Skill, SkillGap


class AnalyzeRequest(BaseModel):
    resume_id: UUID
    job_description_id: UUID


class AnalysisSummary(BaseModel):
    total_current_skills: int
    total_required_skills: int
    total_preferred_skills: int
    total_gaps: int
    critical_gaps: int


class SkillAnalysisRead(BaseModel):
    id: str
    resume_id: str
    job_description_id: str
    skill_gaps: list[SkillGap] = Field(default_factory=list)
    overall_gap: OverallGap
    recommended_focus: list[str] = Field(default_factory=list)
    estimated_time_to_close: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AnalyzeResponse(BaseModel):
    analysis: GapAnalysisResult
    saved_analysis: SkillAnalysisRead | None = None
    summary: AnalysisSummary


class ResumeBrief(BaseModel):
    title: str
    file_name: str
    extracted_skills: list[Skill] | None = None

    model_config = ConfigDict(from_attributes=True)


class JobDescriptionBrief(BaseModel):
    title: str
    company: str
    required_skills: list[Skill] | None = None
    preferred_skills: list[Skill] | None = None

    model_config = ConfigDict(from_attributes=True)


class SkillAnalysisDetail(SkillAnalysisRead):
    resume: ResumeBrief | None = None
    job_description: JobDescriptionBrief | None = None


class AnalysisHistoryResponse(BaseModel):
    analyses: list[SkillAnalysisDetail] = Field(default_factory=list)


class SkillInsights(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    market_demand: str = "medium"
    growth_areas: list[str] = Field(default_factory=list)


class InsightsResponse(BaseModel):
    insights: SkillInsights
    skills_by_category: dict[str, list[Skill]] = Field(default_factory=dict)
