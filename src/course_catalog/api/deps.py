"""FastAPI dependency injection."""

from __future__ import annotations

import uuid

import structlog
from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from course_catalog.auth.context import AuthenticatedUser
from course_catalog.auth.tokens import InvalidTokenError, verify_token
from course_catalog.errors import UnauthorizedError
from course_catalog.storage.database import get_session
from course_catalog.storage.orm import UserRole

__all__ = ["extract_token", "get_current_user", "get_session"]

logger = structlog.get_logger()

# The header carries the token itself; a "Bearer " scheme is tolerated.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def extract_token(header_value: str | None) -> str | None:
    """Return the raw token from an Authorization header value, if any."""
    if header_value is None:
        return None
    value = header_value.strip()
    scheme, _, rest = value.partition(" ")
    if scheme.lower() == "bearer":
        value = rest.strip()
    return value or None


async def get_current_user(
    request: Request,
    authorization: str | None = Security(authorization_header),
) -> AuthenticatedUser:
    """Authenticate request via token, return the caller's identity.

    The identity is also stored on ``request.state.user`` and bound to the
    structlog context, so every later log line of the request carries it.

    Raises:
        UnauthorizedError: missing, malformed, or unverifiable token.
        ConfigurationError: the server has no signing secret.
    """
    token = extract_token(authorization)
    if token is None:
        raise UnauthorizedError("Missing authorization token")

    try:
        claims = verify_token(token)
    except InvalidTokenError as exc:
        logger.info("token_rejected", reason=str(exc), path=request.url.path)
        raise UnauthorizedError("Invalid token") from exc

    try:
        user_id = uuid.UUID(claims.subject)
        role = UserRole(claims.role)
    except ValueError as exc:
        logger.info("token_claims_rejected", path=request.url.path)
        raise UnauthorizedError("Invalid token") from exc

    user = AuthenticatedUser(user_id=user_id, role=role)
    request.state.user = user
    structlog.contextvars.bind_contextvars(user_id=str(user_id), role=str(role))
    return user
