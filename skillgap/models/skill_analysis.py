from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillgap.database import Base
from skillgap.models.resume import new_uuid


class SkillAnalysis(Base):
    __tablename__ = "skill_analyses"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    resume_id = Column(String(36), ForeignKey("resumes.id", ondelete="CASCADE"), nullable=False, index=True)
    job_description_id = Column(
        String(36), ForeignKey("job_descriptions.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Stored as list[SkillGap]
    skill_gaps = Column(JSON, nullable=False, default=list)
    overall_gap = Column(String(16), nullable=False)
    recommended_focus = Column(JSON, nullable=False, default=list)
    estimated_time_to_close = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    resume = relationship("Resume")
    job_description = relationship("JobDescription")
