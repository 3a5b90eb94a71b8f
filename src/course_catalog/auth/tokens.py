"""JWT issuing and verification."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from course_catalog.config import Settings, get_settings
from course_catalog.errors import ConfigurationError


class InvalidTokenError(Exception):
    """Token has a bad signature, is malformed, expired, or lacks claims."""


@dataclass(frozen=True)
class TokenClaims:
    """Claims embedded in a verified token."""

    subject: str
    role: str | None


def _secret(settings: Settings) -> str:
    if settings.jwt_secret is None or not settings.jwt_secret.get_secret_value():
        raise ConfigurationError("JWT_SECRET must be set.")
    return settings.jwt_secret.get_secret_value()


def issue_token(
    user_id: uuid.UUID | str,
    role: str,
    *,
    settings: Settings | None = None,
) -> str:
    """Sign a token for ``user_id`` carrying its role.

    An ``exp`` claim is only added when ``jwt_expires_minutes`` is set.

    Raises:
        ConfigurationError: no signing secret is configured.
    """
    settings = settings or get_settings()
    secret = _secret(settings)

    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": str(role),
        "iat": int(now.timestamp()),
    }
    if settings.jwt_expires_minutes is not None:
        exp = now + timedelta(minutes=settings.jwt_expires_minutes)
        payload["exp"] = int(exp.timestamp())

    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, *, settings: Settings | None = None) -> TokenClaims:
    """Verify signature (and expiry, if present) and return the claims.

    Raises:
        ConfigurationError: no signing secret is configured.
        InvalidTokenError: the token cannot be trusted.
    """
    settings = settings or get_settings()
    secret = _secret(settings)

    if not token:
        raise InvalidTokenError("empty token")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError(str(exc)) from exc

    role = payload.get("role")
    return TokenClaims(
        subject=str(payload["sub"]),
        role=str(role) if role is not None else None,
    )
