"""User administration and profile endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.dependencies import get_current_identity, get_db, require_admin
from taskboard.core.security import Identity
from taskboard.schemas.user import ProfileUpdate, UserRead, UserUpdate
from taskboard.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(
    session: AsyncSession = Depends(get_db),
    _: Identity = Depends(require_admin),
) -> list[UserRead]:
    users = await user_service.list_users(session)
    return [UserRead.model_validate(user) for user in users]


# Profile routes are declared before /{user_id} so "profile" is never taken as an id.
@router.get("/profile", response_model=UserRead)
async def get_profile(
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> UserRead:
    user = await user_service.get_user(session, identity.id)
    return UserRead.model_validate(user)


@router.patch("/profile", response_model=UserRead)
async def update_profile(
    payload: ProfileUpdate,
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> UserRead:
    user = await user_service.update_user(session, identity.id, payload)
    await session.commit()
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    _: Identity = Depends(require_admin),
) -> UserRead:
    user = await user_service.get_user(session, user_id)
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    payload: UserUpdate,
    session: AsyncSession = Depends(get_db),
    _: Identity = Depends(require_admin),
) -> UserRead:
    user = await user_service.update_user(session, user_id, payload)
    await session.commit()
    return UserRead.model_validate(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_user(
    user_id: str,
    session: AsyncSession = Depends(get_db),
    _: Identity = Depends(require_admin),
) -> Response:
    await user_service.delete_user(session, user_id)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
