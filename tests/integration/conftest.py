"""Shared fixtures for integration tests requiring live PostgreSQL."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from course_catalog.auth.passwords import hash_password
from course_catalog.config import get_settings
from course_catalog.storage.orm import Course, Enrollment, User, UserRole

# ── Engine ─────────────────────────────────────────────────────────


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an async engine from settings."""
    engine = create_async_engine(
        get_settings().database_url,
        pool_size=5,
        max_overflow=0,
    )
    yield engine
    await engine.dispose()


# ── Session with savepoint rollback ───────────────────────────────


@pytest.fixture()
async def db_session(
    async_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession]:
    """Provide a session wrapped in a transaction, rolled back after test.

    The session works inside a SAVEPOINT so a repository-level
    ``rollback()`` does not end the outer transaction.
    """
    async with async_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(
            bind=conn,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )

        yield session

        await session.close()
        await trans.rollback()


# ── Seed fixtures ─────────────────────────────────────────────────


def _unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture()
async def seed_users(db_session: AsyncSession) -> list[User]:
    """Three students sharing one password hash."""
    password = hash_password("123456")
    users = [
        User(
            email=f"{_unique('student')}@school.io",
            name=f"Student {i}",
            password=password,
            role=UserRole.STUDENT,
        )
        for i in range(3)
    ]
    db_session.add_all(users)
    await db_session.flush()
    return users


@pytest.fixture()
async def seed_courses(db_session: AsyncSession) -> list[Course]:
    """Two courses with titles unique to this test run."""
    courses = [
        Course(title=_unique("Integration Alpha"), description="First"),
        Course(title=_unique("Integration Beta")),
    ]
    db_session.add_all(courses)
    await db_session.flush()
    return courses


@pytest.fixture()
async def seed_enrollments(
    db_session: AsyncSession,
    seed_users: list[User],
    seed_courses: list[Course],
) -> list[Enrollment]:
    """Two enrollments in the first course, one in the second."""
    enrollments = [
        Enrollment(user_id=seed_users[0].id, course_id=seed_courses[0].id),
        Enrollment(user_id=seed_users[1].id, course_id=seed_courses[0].id),
        Enrollment(user_id=seed_users[2].id, course_id=seed_courses[1].id),
    ]
    db_session.add_all(enrollments)
    await db_session.flush()
    return enrollments
