from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.sql import func

from skillgap.database import Base


def new_uuid() -> str:
    return str(uuid4())


class Resume(Base):
    __tablename__ = "resumes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    file_name = Column(String(255), nullable=False)
    storage_path = Column(String(512), nullable=False)
    content_type = Column(String(128), nullable=True)
    extracted_text = Column(Text, nullable=False, default="")

    # list[Skill] as dumped by the schema layer
    extracted_skills = Column(JSON, nullable=False, default=list)

    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
