# app/security.py
"""Request identity dependencies.

Authentication happens upstream; the identity gateway forwards the resolved
caller in ``X-User-Id`` / ``X-User-Name`` / ``X-User-Roles`` headers.
"""
from __future__ import annotations

from typing import Callable, Set
from uuid import UUID

from fastapi import Depends, Header, status
from sqlalchemy.orm import Session

from app.core.context import CurrentUser, bind_current_user
from app.db import get_db
from app.utils.errors import http_error

ADMIN_ROLE = "Admin"


def get_current_user(
    x_user_id: str | None = Header(default=None, alias="X-User-Id"),
    x_user_name: str | None = Header(default=None, alias="X-User-Name"),
) -> CurrentUser | None:
    """Return the forwarded caller, or ``None`` for anonymous/system requests."""

    if not x_user_id and not x_user_name:
        return None
    user_id: UUID | None = None
    if x_user_id:
        try:
            user_id = UUID(x_user_id.strip())
        except ValueError as exc:
            raise http_error(status.HTTP_400_BAD_REQUEST, "INVALID_USER_ID", "X-User-Id must be a UUID.") from exc
    name = x_user_name.strip() if x_user_name else None
    return CurrentUser(user_id=user_id, display_name=name or None)


def get_request_db(
    db: Session = Depends(get_db),
    user: CurrentUser | None = Depends(get_current_user),
) -> Session:
    """Database session whose flushes are attributed to the current caller."""

    return bind_current_user(db, user)


def _roles(x_user_roles: str | None = Header(default=None, alias="X-User-Roles")) -> set[str]:
    if not x_user_roles:
        return set()
    return {role.strip() for role in x_user_roles.split(",") if role.strip()}


def require_roles(allowed: Set[str]) -> Callable:
    """Require the caller to hold one of ``allowed`` (admins always pass)."""

    if not allowed:
        raise RuntimeError("require_roles needs a non-empty set of roles")

    def _dep(
        user: CurrentUser | None = Depends(get_current_user),
        roles: set[str] = Depends(_roles),
    ) -> CurrentUser:
        if user is None:
            raise http_error(status.HTTP_401_UNAUTHORIZED, "NOT_AUTHENTICATED", "Authenticated user required.")
        if ADMIN_ROLE in roles or roles & allowed:
            return user
        raise http_error(
            status.HTTP_403_FORBIDDEN,
            "INSUFFICIENT_ROLE",
            f"Requires one of: {sorted(allowed)}",
        )

    return _dep


__all__ = ["ADMIN_ROLE", "get_current_user", "get_request_db", "require_roles"]
