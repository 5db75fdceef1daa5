"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Coroutine
from typing import Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.config import Settings
from taskboard.core.errors import ForbiddenError, UnauthorizedError
from taskboard.core.security import Identity, TokenSigner
from taskboard.db.session import get_session
from taskboard.models.enums import UserRole

logger = logging.getLogger(__name__)

# Missing credentials are reported by get_current_identity so every failure is a 401.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    async with get_session(request.app.state.session_factory) as session:
        yield session


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    signer: TokenSigner = Depends(get_token_signer),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")
    try:
        return signer.validate(credentials.credentials)
    except UnauthorizedError as exc:
        logger.warning("Rejected bearer token: %s", exc.detail)
        raise


def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, Identity]]:
    """Build a dependency that admits only identities holding one of ``roles``."""

    allowed = frozenset(roles)

    async def _check(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in allowed:
            raise ForbiddenError("Insufficient permissions")
        return identity

    return _check


require_admin = require_roles(UserRole.ADMIN)
