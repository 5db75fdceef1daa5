"""Pydantic schemas for task operations."""
from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.models.enums import TaskPriority, TaskStatus
from taskboard.schemas.user import UserSummary, as_utc


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TaskCreate(BaseModel):
    # Unknown fields such as an owner id are dropped; the owner is always the caller.
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: date | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value):
        return _blank_to_none(value)


class TaskUpdate(BaseModel):
    """Partial update. An explicit ``null`` due date clears it; an omitted one is left alone."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value):
        return _blank_to_none(value)


class TaskRead(BaseModel):
    id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: TaskPriority
    due_date: date | None
    user_id: str
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)


class TaskStats(BaseModel):
    total: int
    pending: int
    in_progress: int
    completed: int
