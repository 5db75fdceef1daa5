"""Login and registration flows."""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import UnauthorizedError
from taskboard.core.security import Identity, PasswordHasher, TokenSigner
from taskboard.models.user import User
from taskboard.schemas.auth import LoginResponse
from taskboard.schemas.user import UserCreate, UserSummary
from taskboard.services.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)


def identity_for(user: User) -> Identity:
    return Identity(id=user.id, email=user.email, role=user.role)


async def authenticate_user(
    session: AsyncSession, email: str, password: str, reject_inactive: bool = False
) -> User | None:
    user = await get_user_by_email(session, email)
    if not user:
        return None
    if not PasswordHasher.verify(password, user.password_hash):
        return None
    if reject_inactive and not user.is_active:
        return None
    return user


async def login(
    session: AsyncSession,
    signer: TokenSigner,
    email: str,
    password: str,
    reject_inactive: bool = False,
) -> LoginResponse:
    user = await authenticate_user(session, email, password, reject_inactive=reject_inactive)
    if not user:
        logger.warning("Failed login attempt for %s", email)
        raise UnauthorizedError("Invalid credentials")

    token = signer.issue(identity_for(user))
    return LoginResponse(access_token=token, user=UserSummary.model_validate(user))


async def register(session: AsyncSession, user_in: UserCreate) -> User:
    return await create_user(session, user_in)
