"""User service functions for CRUD and authentication."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import ConflictError, NotFoundError
from taskboard.core.security import PasswordHasher
from taskboard.models.user import User
from taskboard.schemas.user import ProfileUpdate, UserCreate, UserUpdate

logger = logging.getLogger(__name__)


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return the full record, password hash included. Only login may use this."""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).order_by(User.created_at))
    return list(result.scalars().all())


async def get_user(session: AsyncSession, user_id: str) -> User:
    user = await session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def create_user(session: AsyncSession, user_in: UserCreate) -> User:
    if await get_user_by_email(session, user_in.email):
        raise ConflictError("Email already exists")

    user = User(
        email=user_in.email,
        name=user_in.name,
        password_hash=PasswordHasher.hash(user_in.password),
        role=user_in.role,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration of the same email.
        await session.rollback()
        raise ConflictError("Email already exists") from exc
    logger.info("Created user %s (%s)", user.email, user.role.value)
    return user


async def update_user(session: AsyncSession, user_id: str, data: ProfileUpdate | UserUpdate) -> User:
    """Apply a partial update. Only the admin-facing ``UserUpdate`` can change the role."""
    user = await get_user(session, user_id)

    if data.email is not None and data.email != user.email:
        existing = await get_user_by_email(session, data.email)
        if existing and existing.id != user.id:
            raise ConflictError("Email already exists")
        user.email = data.email
    if data.name is not None:
        user.name = data.name
    if isinstance(data, UserUpdate) and data.role is not None:
        user.role = data.role

    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError("Email already exists") from exc
    return user


async def delete_user(session: AsyncSession, user_id: str) -> None:
    user = await get_user(session, user_id)
    # Owned tasks are removed through the relationship cascade.
    await session.delete(user)
    await session.flush()
    logger.info("Deleted user %s", user_id)
