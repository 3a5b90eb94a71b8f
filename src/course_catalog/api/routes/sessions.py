"""Login endpoint."""

from __future__ import annotations

import asyncio
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from course_catalog.api.deps import get_session
from course_catalog.api.schemas import ErrorResponse, LoginRequest, LoginResponse
from course_catalog.auth.passwords import DUMMY_PASSWORD_HASH, verify_password
from course_catalog.auth.tokens import issue_token
from course_catalog.errors import InvalidCredentialsError
from course_catalog.storage.repositories import UserRepository

logger = structlog.get_logger()

router = APIRouter(tags=["auth"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@router.post(
    "/sessions",
    summary="Login",
    responses={400: {"model": ErrorResponse, "description": "Invalid credentials."}},
)
async def login(body: LoginRequest, session: SessionDep) -> LoginResponse:
    """Exchange email and password for a signed token.

    Unknown email and wrong password produce the same response. An unknown
    email is still checked against a dummy hash so both cost the same.
    Hashing runs in a worker thread to keep the event loop free.
    """
    user = await UserRepository(session).get_by_email(body.email)

    stored_hash = user.password if user is not None else DUMMY_PASSWORD_HASH
    matches = await asyncio.to_thread(verify_password, body.password, stored_hash)

    if user is None or not matches:
        logger.info("login_failed")
        raise InvalidCredentialsError()

    token = issue_token(user.id, user.role)
    logger.info("login_succeeded", user_id=str(user.id))
    return LoginResponse(token=token)
