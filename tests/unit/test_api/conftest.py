"""Fixtures shared by the HTTP-level tests.

Tokens are signed with a fixed test secret; ``get_settings`` is patched
where the token module reads it so the real environment is irrelevant.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator, Callable, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from course_catalog.api.app import app
from course_catalog.auth.tokens import issue_token
from course_catalog.config import Settings
from course_catalog.storage.database import get_session
from course_catalog.storage.orm import UserRole

TEST_SETTINGS = Settings(jwt_secret="test-secret", _env_file=None)  # type: ignore[arg-type]


@pytest.fixture(autouse=True)
def jwt_settings() -> Generator[Settings]:
    with patch("course_catalog.auth.tokens.get_settings", return_value=TEST_SETTINGS):
        yield TEST_SETTINGS


@pytest.fixture()
def token_for() -> Callable[..., str]:
    """Return a factory that signs a token for the given role."""

    def _make(
        role: UserRole = UserRole.STUDENT, user_id: uuid.UUID | None = None
    ) -> str:
        return issue_token(user_id or uuid.uuid4(), role, settings=TEST_SETTINGS)

    return _make


@pytest.fixture()
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture()
async def client(mock_session: AsyncMock) -> AsyncGenerator[AsyncClient]:
    """AsyncClient with DB override but NO auth override."""
    app.dependency_overrides[get_session] = lambda: mock_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()
