"""Audit log model."""
from datetime import datetime
from enum import Enum as PyEnum
from uuid import UUID

from sqlalchemy import String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.utils.time import utcnow

from .base import Base, UTCDateTime


class AuditAction(str, PyEnum):
    """Kinds of change recorded by the flush interceptor."""

    CREATE = "Create"
    UPDATE = "Update"
    SOFT_DELETE = "SoftDelete"


class AuditLog(Base):
    """Represents one audited change to a persisted record."""

    __tablename__ = "audit_logs"

    user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    user_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    entity_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    entity_id: Mapped[str] = mapped_column(String(100), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    old_values: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_values: Mapped[str | None] = mapped_column(Text, nullable=True)
    affected_columns: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False, index=True)
    created_by: Mapped[str | None] = mapped_column(String(256), nullable=True)
