"""Authorization dependency factories."""

from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import Depends

from course_catalog.api.deps import get_current_user
from course_catalog.auth.context import AuthenticatedUser
from course_catalog.errors import ForbiddenError
from course_catalog.storage.orm import UserRole

Predicate = Callable[[AuthenticatedUser], bool]

_user_dep = Depends(get_current_user)


def has_role(*roles: UserRole) -> Predicate:
    """Predicate: the caller holds one of ``roles``."""
    allowed = frozenset(roles)

    def _predicate(user: AuthenticatedUser) -> bool:
        return user.role in allowed

    return _predicate


def require(
    predicate: Predicate,
    description: str = "Forbidden",
) -> Callable[..., Coroutine[Any, Any, AuthenticatedUser]]:
    """Dependency factory: authenticate, then check ``predicate``.

    Usage as parameter dependency (returns AuthenticatedUser)::

        async def endpoint(
            user: AuthenticatedUser = Depends(require(is_owner, "Not yours")),
        ): ...

    Raises:
        ForbiddenError: no identity, or the predicate rejects it.
    """

    async def _check(
        user: AuthenticatedUser | None = _user_dep,
    ) -> AuthenticatedUser:
        if user is None or not predicate(user):
            raise ForbiddenError(description)
        return user

    return _check


def require_role(
    *roles: UserRole,
) -> Callable[..., Coroutine[Any, Any, AuthenticatedUser]]:
    """Dependency factory: require the caller to hold one of ``roles``."""
    names = " or ".join(str(r) for r in roles)
    return require(has_role(*roles), f"Requires role: {names}")
