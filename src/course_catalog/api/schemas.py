"""Request/response schemas for the API layer."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# --- Errors ---


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str = Field(description="Human-readable error message.")


# --- Sessions ---


class LoginRequest(BaseModel):
    """Request body for POST /sessions."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    token: str = Field(description="Signed token for the Authorization header.")


# --- Course ---


class CourseCreateRequest(BaseModel):
    """Request body for POST /courses."""

    title: str = Field(
        ...,
        min_length=5,
        description="Course title, at least 5 characters, unique.",
    )
    description: str | None = None


class CourseCreateResponse(BaseModel):
    """Response for POST /courses."""

    model_config = ConfigDict(populate_by_name=True)

    course_id: uuid.UUID = Field(alias="courseId")


class CourseResponse(BaseModel):
    """A single course."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None


class CourseDetailResponse(BaseModel):
    """Response for ``GET /courses/{id}``."""

    course: CourseResponse


class CourseListItem(BaseModel):
    """Course summary annotated with its live enrollment count."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    enrollments: int = Field(description="Number of users enrolled.")


class CourseListResponse(BaseModel):
    """Response for ``GET /courses``.

    Example::

        {
            "total": 42,
            "courses": [{"id": "...", "title": "Python 101", "enrollments": 3}]
        }
    """

    total: int = Field(
        description="Total number of courses matching the search (across all pages)."
    )
    courses: list[CourseListItem] = Field(
        description="Courses on the requested page."
    )
