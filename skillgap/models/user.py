# user.py
from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func
from skillgap.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    current_role = Column(String(255), nullable=True)
    target_role = Column(String(255), nullable=True)
    # entry | mid | senior | lead
    experience = Column(String(16), nullable=False, default="entry")
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
