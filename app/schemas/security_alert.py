"""Security alert schemas."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from app.models.security_alert import SecurityAlertType, SecuritySeverity
from app.utils.time import ensure_utc


class SecurityAlertRead(BaseModel):
    id: UUID
    title: str
    severity: SecuritySeverity
    alert_type: SecurityAlertType
    description: str
    source: str | None
    ip_address: str | None
    affected_user_name: str | None
    is_resolved: bool
    resolved_by_name: str | None
    resolved_at: datetime | None
    detected_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("resolved_at", "detected_at")
    @classmethod
    def _ensure_timezone(cls, value: datetime | None) -> datetime | None:
        if value is None:
            return None
        return ensure_utc(value)
