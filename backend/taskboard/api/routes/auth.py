"""Authentication endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import Settings
from taskboard.core.dependencies import get_app_settings, get_db, get_token_signer
from taskboard.core.security import TokenSigner
from taskboard.schemas.auth import LoginRequest, LoginResponse
from taskboard.schemas.user import UserCreate, UserRead
from taskboard.services import auth as auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_app_settings),
) -> LoginResponse:
    return await auth_service.login(
        session,
        signer,
        payload.email,
        payload.password,
        reject_inactive=settings.reject_inactive_login,
    )


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, session: AsyncSession = Depends(get_db)) -> UserRead:
    user = await auth_service.register(session, payload)
    await session.commit()
    return UserRead.model_validate(user)
