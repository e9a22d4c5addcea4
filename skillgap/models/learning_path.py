from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import func

from skillgap.database import Base
from skillgap.models.resume import new_uuid


class LearningPath(Base):
    __tablename__ = "learning_paths"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    skill_gaps = Column(JSON, nullable=False, default=list)
    resources = Column(JSON, nullable=False, default=list)
    estimated_timeline = Column(Integer, nullable=False, default=0)
    # Skill ids, highest priority first
    priority_order = Column(JSON, nullable=False, default=list)
    learning_strategy = Column(Text, nullable=True)

    # Progress tracking
    completed_resources = Column(JSON, nullable=True)
    current_skill = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
