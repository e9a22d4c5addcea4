# user.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


Experience = Literal["entry", "mid", "senior", "lead"]


def _validate_email_like(v: str) -> str:
    value = (v or "").strip().lower()
    if "@" not in value:
        raise ValueError("email must contain '@'")
    left, right = value.split("@", 1)
    if not left or not right:
        raise ValueError("email must have text before and after '@'")
    return value


class SignupRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    name: str

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _validate_email_like(v)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        value = (v or "").strip()
        if len(value) < 2:
            raise ValueError("name must be at least 2 characters")
        return value


class SigninRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str) -> str:
        return _validate_email_like(v)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class UserRead(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    current_role: Optional[str] = None
    target_role: Optional[str] = None
    experience: Experience = "entry"
    role: str = "user"
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    current_role: Optional[str] = None
    target_role: Optional[str] = None
    experience: Optional[Experience] = None

    @field_validator("name", "current_role", "target_role")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) < 2:
            raise ValueError("name must be at least 2 characters")
        return v


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: int


class SigninResponse(BaseModel):
    user: UserRead
    session: Token


class TokenData(BaseModel):
    user_id: int


class MessageResponse(BaseModel):
    message: str
