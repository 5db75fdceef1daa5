"""Authentication-related schemas."""
from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from taskboard.schemas.user import UserSummary


class LoginRequest(BaseModel):
    # Normalized the same way as at registration so the stored address matches.
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserSummary
