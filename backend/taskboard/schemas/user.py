"""Pydantic schemas for user operations."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from taskboard.models.enums import UserRole


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps; SQLite hands them back without tzinfo."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=128)


class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = UserRole.USER


class UserRead(UserBase):
    """Public view of a user; the password hash is never part of it."""

    id: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)


class UserSummary(BaseModel):
    id: str
    email: str
    name: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=128)


class UserUpdate(ProfileUpdate):
    role: UserRole | None = None
