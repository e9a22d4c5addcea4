from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import AliasChoices, BaseModel, Field, field_validator


class _LenientEnum(str, Enum):
    """String enum whose `coerce` maps unknown input to `default()`.

    The default is the first declared member unless a subclass overrides it.
    """

    @classmethod
    def default(cls) -> "_LenientEnum":
        return next(iter(cls))

    @classmethod
    def coerce(cls, value: Any):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value.lower() == key:
                    return member
        return cls.default()


class SkillLevel(_LenientEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _LEVEL_RANKS[self]


_LEVEL_RANKS = {
    SkillLevel.BEGINNER: 1,
    SkillLevel.INTERMEDIATE: 2,
    SkillLevel.ADVANCED: 3,
    SkillLevel.EXPERT: 4,
}


class SkillCategory(_LenientEnum):
    PROGRAMMING_LANGUAGES = "Programming Languages"
    FRAMEWORKS_LIBRARIES = "Frameworks & Libraries"
    DATABASES = "Databases"
    CLOUD_PLATFORMS = "Cloud Platforms"
    DEVOPS_TOOLS = "DevOps & Tools"
    SOFT_SKILLS = "Soft Skills"
    DESIGN = "Design & UX"
    DATA_SCIENCE = "Data Science & ML"
    MOBILE = "Mobile Development"
    WEB_TECHNOLOGIES = "Web Technologies"
    SECURITY = "Security"
    TESTING = "Testing & QA"
    OTHER = "Other"

    @classmethod
    def default(cls) -> "SkillCategory":
        return cls.OTHER


class GapSize(_LenientEnum):
    NONE = "none"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @classmethod
    def default(cls) -> "GapSize":
        return cls.MEDIUM


class OverallGap(_LenientEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @classmethod
    def default(cls) -> "OverallGap":
        return cls.MEDIUM


class Priority(_LenientEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def default(cls) -> "Priority":
        return cls.MEDIUM


def new_skill_id() -> str:
    return f"skill_{uuid4().hex[:12]}"


class Skill(BaseModel):
    id: str = Field(default_factory=new_skill_id)
    name: str
    category: SkillCategory = SkillCategory.OTHER
    level: SkillLevel = SkillLevel.BEGINNER
    years_of_experience: float | None = Field(
        default=None,
        validation_alias=AliasChoices("years_of_experience", "yearsOfExperience"),
    )
    # Only set by LLM extraction; never used in scoring.
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return new_skill_id()
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: Any) -> str:
        return str(v or "").strip()

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, v: Any) -> SkillCategory:
        return SkillCategory.coerce(v)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, v: Any) -> SkillLevel:
        return SkillLevel.coerce(v)


class SkillGap(BaseModel):
    skill: Skill
    current_level: SkillLevel = Field(
        default=SkillLevel.BEGINNER,
        validation_alias=AliasChoices("current_level", "currentLevel"),
    )
    required_level: SkillLevel = Field(
        default=SkillLevel.BEGINNER,
        validation_alias=AliasChoices("required_level", "requiredLevel"),
    )
    gap: GapSize
    priority: Priority

    @field_validator("current_level", "required_level", mode="before")
    @classmethod
    def _coerce_levels(cls, v: Any) -> SkillLevel:
        return SkillLevel.coerce(v)


class GapAnalysisResult(BaseModel):
    skill_gaps: list[SkillGap] = Field(default_factory=list)
    overall_gap: OverallGap = OverallGap.SMALL
    recommended_focus: list[str] = Field(default_factory=list)
    estimated_time_to_close: int = 0


class ExtractedJobSkills(BaseModel):
    required: list[Skill] = Field(default_factory=list)
    preferred: list[Skill] = Field(default_factory=list)
