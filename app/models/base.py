"""Declarative base model and capability mixins for SQLAlchemy."""
from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from app.utils.time import ensure_utc, utcnow


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes, also on backends that store them naive (SQLite)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return ensure_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return ensure_utc(value)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)


class Auditable:
    """Opt-in capability: creation/modification timestamps and actors are stamped on flush."""

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False)
    created_by: Mapped[str | None] = mapped_column(String(256), nullable=True)
    modified_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    modified_by: Mapped[str | None] = mapped_column(String(256), nullable=True)


class SoftDeletable:
    """Opt-in capability: deleting the row flags it instead of removing it."""

    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(String(256), nullable=True)


AUDIT_STAMP_COLUMNS = frozenset({"created_at", "created_by", "modified_at", "modified_by"})
