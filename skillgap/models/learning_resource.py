from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, Integer, JSON, String, Text
from sqlalchemy.sql import func

from skillgap.database import Base
from skillgap.models.resume import new_uuid


class LearningResource(Base):
    """Shared catalog entry; not owned by a single user."""

    __tablename__ = "learning_resources"

    id = Column(String(36), primary_key=True, default=new_uuid)
    title = Column(String(200), nullable=False, index=True)
    type = Column(String(32), nullable=False, index=True)
    url = Column(String(2048), nullable=False)
    difficulty = Column(String(16), nullable=False, default="beginner", index=True)
    estimated_hours = Column(Integer, nullable=False, default=10)
    cost = Column(String(16), nullable=False, default="free")
    # list[str] of skill names
    skills = Column(JSON, nullable=False, default=list)
    rating = Column(Float, nullable=False, default=0.0)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
