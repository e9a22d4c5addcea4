from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from skillgap.schemas.skills import Skill


class ResumeRead(BaseModel):
    id: str
    title: str
    description: str = ""
    file_name: str
    storage_path: str
    content_type: str | None = None
    extracted_skills: list[Skill] = Field(default_factory=list)
    uploaded_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ResumeUploadResponse(BaseModel):
    resume: ResumeRead
    extracted_skills: list[Skill] = Field(default_factory=list)
    # First 500 characters of the extracted text
    extracted_text: str
