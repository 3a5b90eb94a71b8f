"""Authenticated user context for request processing."""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from course_catalog.storage.orm import UserRole


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity of the caller, valid for the lifetime of one request.

    Extracted from a verified token during authentication. Never persisted.
    """

    user_id: uuid.UUID
    role: UserRole
