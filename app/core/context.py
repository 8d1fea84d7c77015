"""Per-request actor context bound explicitly to database sessions."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

SYSTEM_ACTOR = "System"
_SESSION_KEY = "current_user"


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller on whose behalf changes are flushed."""

    user_id: UUID | None = None
    display_name: str | None = None

    @property
    def actor_name(self) -> str:
        return self.display_name or SYSTEM_ACTOR


def bind_current_user(session: Session | AsyncSession, user: CurrentUser | None) -> Session | AsyncSession:
    """Attach ``user`` to ``session``; ``None`` clears any previous binding.

    ``AsyncSession.info`` is the info dict of its sync session, so both flush
    paths see the same user.
    """

    if user is None:
        session.info.pop(_SESSION_KEY, None)
    else:
        session.info[_SESSION_KEY] = user
    return session


def current_user_for(session: Session) -> CurrentUser | None:
    return session.info.get(_SESSION_KEY)


__all__ = ["SYSTEM_ACTOR", "CurrentUser", "bind_current_user", "current_user_for"]
