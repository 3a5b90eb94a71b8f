"""Course catalog API endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.api.deps import get_current_user, get_session
from course_catalog.api.schemas import (
    CourseCreateRequest,
    CourseCreateResponse,
    CourseDetailResponse,
    CourseListItem,
    CourseListResponse,
    CourseResponse,
    ErrorResponse,
)
from course_catalog.auth.context import AuthenticatedUser
from course_catalog.auth.roles import require_role
from course_catalog.config import settings
from course_catalog.errors import CourseNotFoundError
from course_catalog.storage.orm import UserRole
from course_catalog.storage.repositories import CourseOrder, CourseRepository

logger = structlog.get_logger()

router = APIRouter(tags=["courses"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]
UserDep = Annotated[AuthenticatedUser, Depends(get_current_user)]
ManagerDep = Annotated[AuthenticatedUser, Depends(require_role(UserRole.MANAGER))]

# Keeps the computed OFFSET within PostgreSQL's BIGINT range.
MAX_PAGE = 1_000_000

AUTH_ERRORS: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid request parameters."},
    401: {"model": ErrorResponse, "description": "Missing or invalid token."},
}


@router.post(
    "/courses",
    status_code=201,
    summary="Create a new course",
    responses={
        **AUTH_ERRORS,
        403: {"model": ErrorResponse, "description": "Manager role required."},
        500: {"model": ErrorResponse, "description": "Couldn't create course."},
    },
)
async def create_course(
    body: CourseCreateRequest,
    user: ManagerDep,
    session: SessionDep,
) -> CourseCreateResponse:
    """Create a course with a title and optional description."""
    repo = CourseRepository(session)
    course = await repo.create(title=body.title, description=body.description)
    await session.commit()
    logger.info("course_created", course_id=str(course.id))
    return CourseCreateResponse(course_id=course.id)


@router.get(
    "/courses",
    summary="List courses",
    responses=AUTH_ERRORS,
)
async def list_courses(
    user: UserDep,
    session: SessionDep,
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring to match against course titles.",
    ),
    order_by: CourseOrder = Query(
        default=CourseOrder.ID,
        description="Ordering column: id or title.",
    ),
    page: int = Query(
        default=1,
        ge=1,
        le=MAX_PAGE,
        description="1-based page number.",
    ),
) -> CourseListResponse:
    """List courses with their enrollment counts.

    ``total`` counts every course matching ``search``; ``courses``
    holds one page of them, each with its number of enrollments.
    """
    repo = CourseRepository(session)
    page_size = settings.courses_page_size
    rows = await repo.list_with_enrollments(
        search=search,
        order_by=order_by,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    total = await repo.count(search=search)
    return CourseListResponse(
        total=total,
        courses=[CourseListItem.model_validate(r) for r in rows],
    )


@router.get(
    "/courses/{course_id}",
    summary="Get course by ID",
    responses={
        **AUTH_ERRORS,
        404: {"model": ErrorResponse, "description": "Course not found."},
    },
)
async def get_course(
    course_id: uuid.UUID,
    user: UserDep,
    session: SessionDep,
) -> CourseDetailResponse:
    """Get a single course by its ID."""
    repo = CourseRepository(session)
    course = await repo.get_by_id(course_id)
    if course is None:
        raise CourseNotFoundError()
    return CourseDetailResponse(course=CourseResponse.model_validate(course))
