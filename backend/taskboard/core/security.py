"""Security helpers for password hashing and access-token signing."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from taskboard.core.errors import UnauthorizedError
from taskboard.models.enums import UserRole

logger = logging.getLogger(__name__)

_password_context = CryptContext(schemes=["argon2"], deprecated="auto")


class PasswordHasher:
    """Hash and verify user passwords using Argon2id."""

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        # Unrecognised hash formats are a mismatch, not an error.
        try:
            return _password_context.verify(password, hashed)
        except ValueError:
            return False


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller decoded from an access token."""

    id: str
    email: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


class TokenSigner:
    """Issue and validate signed, time-limited access tokens.

    Tokens carry the claim set ``sub``/``email``/``role`` and are trusted
    without a database lookup until they expire after ``max_age`` seconds.
    """

    def __init__(self, secret_key: str, max_age: int, salt: str = "taskboard-access-token") -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt=salt)
        self._max_age = max_age

    @property
    def max_age(self) -> int:
        return self._max_age

    def issue(self, identity: Identity) -> str:
        return self._serializer.dumps(
            {"sub": identity.id, "email": identity.email, "role": identity.role.value}
        )

    def validate(self, token: str) -> Identity:
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired as exc:
            raise UnauthorizedError("Token has expired") from exc
        except BadData as exc:
            raise UnauthorizedError("Invalid token") from exc
        return self._identity_from_claims(payload)

    @staticmethod
    def _identity_from_claims(payload: Any) -> Identity:
        if not isinstance(payload, dict):
            raise UnauthorizedError("Invalid token claims")
        subject = payload.get("sub")
        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(subject, str) or not isinstance(email, str) or not subject:
            raise UnauthorizedError("Invalid token claims")
        try:
            return Identity(id=subject, email=email, role=UserRole(role))
        except ValueError as exc:
            logger.warning("Rejected token with unknown role %r", role)
            raise UnauthorizedError("Invalid token claims") from exc
