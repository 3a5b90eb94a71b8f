"""Tests for request correlation in logs."""

import uuid
from collections.abc import Callable, Generator
from unittest.mock import MagicMock, patch

import pytest
import structlog
from httpx import AsyncClient

from course_catalog.storage.orm import UserRole
from course_catalog.storage.repositories import CourseRepository


@pytest.fixture(autouse=True)
def _clean_log_context() -> Generator[None]:
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


def _course_mock() -> MagicMock:
    course = MagicMock()
    course.id = uuid.uuid4()
    course.title = "Python 101"
    course.description = None
    return course


class TestRequestLogging:
    async def test_response_carries_request_id(
        self, client: AsyncClient, token_for: Callable[..., str]
    ) -> None:
        with patch.object(CourseRepository, "get_by_id", return_value=_course_mock()):
            first = await client.get(
                f"/courses/{uuid.uuid4()}", headers={"Authorization": token_for()}
            )
            second = await client.get(
                f"/courses/{uuid.uuid4()}", headers={"Authorization": token_for()}
            )
        assert first.headers["X-Request-ID"]
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]

    async def test_handler_logs_carry_request_and_user(
        self, client: AsyncClient, token_for: Callable[..., str]
    ) -> None:
        """A log line emitted inside a handler sees the request and the caller."""
        user_id = uuid.uuid4()
        seen: list[dict[str, object]] = []

        def record(event: str, **kw: object) -> None:
            seen.append({"event": event, **structlog.contextvars.get_contextvars()})

        with (
            patch.object(CourseRepository, "create", return_value=_course_mock()),
            patch("course_catalog.api.routes.courses.logger") as route_logger,
        ):
            route_logger.info.side_effect = record
            response = await client.post(
                "/courses",
                json={"title": "Python 101"},
                headers={"Authorization": token_for(UserRole.MANAGER, user_id)},
            )
        assert response.status_code == 201
        (entry,) = seen
        assert entry["event"] == "course_created"
        assert entry["request_id"] == response.headers["X-Request-ID"]
        assert entry["method"] == "POST"
        assert entry["path"] == "/courses"
        assert entry["user_id"] == str(user_id)
        assert entry["role"] == "manager"

    async def test_access_log_includes_user(
        self, client: AsyncClient, token_for: Callable[..., str]
    ) -> None:
        user_id = uuid.uuid4()
        with (
            patch.object(CourseRepository, "get_by_id", return_value=_course_mock()),
            patch("course_catalog.api.middleware.logger") as access_logger,
        ):
            response = await client.get(
                f"/courses/{uuid.uuid4()}",
                headers={"Authorization": token_for(user_id=user_id)},
            )
        access_logger.info.assert_called_once()
        kwargs = access_logger.info.call_args.kwargs
        assert kwargs["status_code"] == response.status_code == 200
        assert kwargs["user_id"] == str(user_id)

    async def test_request_context_does_not_outlive_request(
        self, client: AsyncClient
    ) -> None:
        await client.get("/courses")
        assert "request_id" not in structlog.contextvars.get_contextvars()

    async def test_stale_context_is_cleared(
        self, client: AsyncClient, token_for: Callable[..., str]
    ) -> None:
        """Values bound before a request never leak into its logs."""
        structlog.contextvars.bind_contextvars(user_id="someone-else")
        seen: list[dict[str, object]] = []

        def record(event: str, **kw: object) -> None:
            seen.append(dict(structlog.contextvars.get_contextvars()))

        with patch("course_catalog.api.middleware.logger") as access_logger:
            access_logger.info.side_effect = record
            await client.get("/courses")
        (context,) = seen
        assert "user_id" not in context
        assert context["path"] == "/courses"
