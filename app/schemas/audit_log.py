"""Audit log schemas."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from app.utils.time import ensure_utc


class AuditLogRead(BaseModel):
    id: UUID
    user_id: UUID | None
    user_name: str | None
    entity_name: str
    entity_id: str
    action: str
    description: str | None = None
    old_values: str | None
    new_values: str | None
    affected_columns: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class AuditLogPage(BaseModel):
    items: list[AuditLogRead]
    total: int
    page: int
    page_size: int
