"""Authentication primitives: passwords, tokens, request identity.

Note: ``require`` / ``require_role`` live in ``auth.roles`` and are NOT
re-exported here to avoid a circular import (auth → roles → api.deps → auth).
Import directly: ``from course_catalog.auth.roles import require_role``.
"""

from course_catalog.auth.context import AuthenticatedUser
from course_catalog.auth.passwords import hash_password, verify_password
from course_catalog.auth.tokens import (
    InvalidTokenError,
    TokenClaims,
    issue_token,
    verify_token,
)

__all__ = [
    "AuthenticatedUser",
    "InvalidTokenError",
    "TokenClaims",
    "hash_password",
    "issue_token",
    "verify_password",
    "verify_token",
]
