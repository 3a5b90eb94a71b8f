"""Domain-specific exceptions for course-catalog.

Each exception carries the HTTP status it maps to; the API layer
renders all of them as ``{"error": <message>}``.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that terminate a request with a known status."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentialsError(AppError):
    """Unknown email or wrong password. Deliberately indistinguishable."""

    status_code = 400
    default_message = "Invalid credentials."


class UnauthorizedError(AppError):
    """Missing, malformed, or unverifiable token."""

    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    """Authenticated identity lacks the required permission."""

    status_code = 403
    default_message = "Forbidden"


class CourseNotFoundError(AppError):
    status_code = 404
    default_message = "Course not found"


class CourseCreateError(AppError):
    """Store rejected the course insert (e.g. duplicate title)."""

    status_code = 500
    default_message = "Failed to create course"


class ConfigurationError(AppError):
    """Required server configuration is missing."""

    status_code = 500
