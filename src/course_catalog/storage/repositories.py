"""Repositories for database operations."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import structlog
from sqlalchemy import ColumnElement, Row, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.errors import CourseCreateError
from course_catalog.storage.orm import Course, Enrollment, User

logger = structlog.get_logger()


class CourseOrder(StrEnum):
    """Columns a course listing can be ordered by."""

    ID = "id"
    TITLE = "title"


class CourseRepository:
    """Course CRUD plus the enrollment-annotated listing."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        title: str,
        description: str | None = None,
    ) -> Course:
        """Insert a new course and flush to obtain its id.

        Args:
            title: Course title, unique across all courses.
            description: Optional course description.

        Returns:
            The newly created Course ORM instance.

        Raises:
            CourseCreateError: the store rejected the insert
                (duplicate title, connection failure, ...).
        """
        course = Course(title=title, description=description)
        self._session.add(course)
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            logger.warning(
                "course_create_failed", title=title, error=type(exc).__name__
            )
            raise CourseCreateError() from exc
        return course

    async def get_by_id(self, course_id: uuid.UUID) -> Course | None:
        """Get course by primary key.

        Args:
            course_id: UUID of the course.

        Returns:
            Course if found, None otherwise.
        """
        stmt = select(Course).where(Course.id == course_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_enrollments(
        self,
        *,
        search: str | None = None,
        order_by: CourseOrder = CourseOrder.ID,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Row[Any]]:
        """List courses with their live enrollment counts.

        Courses without enrollments are included with a count of 0
        (LEFT JOIN). Ties on the ordering column are broken by id so
        the page contents are stable for a fixed data set.

        Args:
            search: Case-insensitive substring to match against the title.
            order_by: Primary ordering column.
            limit: Page size.
            offset: Number of rows to skip.

        Returns:
            Rows with ``id``, ``title`` and ``enrollments`` attributes.
        """
        ordering: list[ColumnElement[Any]] = [Course.id]
        if order_by == CourseOrder.TITLE:
            ordering.insert(0, Course.title)

        stmt = (
            select(
                Course.id,
                Course.title,
                func.count(Enrollment.id).label("enrollments"),
            )
            .outerjoin(Enrollment, Enrollment.course_id == Course.id)
            .where(*self._search_filter(search))
            .group_by(Course.id)
            .order_by(*ordering)
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.all())

    async def count(self, *, search: str | None = None) -> int:
        """Count courses matching the optional title search.

        Returns:
            Total number of matching courses, independent of paging.
        """
        stmt = (
            select(func.count())
            .select_from(Course)
            .where(*self._search_filter(search))
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    @staticmethod
    def _search_filter(search: str | None) -> Sequence[ColumnElement[bool]]:
        if not search:
            return ()
        return (Course.title.icontains(search, autoescape=True),)


class UserRepository:
    """Read access to users for authentication."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> User | None:
        """Get user by (unique) email address.

        Args:
            email: Email as submitted at login.

        Returns:
            User if found, None otherwise.
        """
        stmt = select(User).where(User.email == email)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()
