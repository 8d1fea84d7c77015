"""Security alert model."""
from datetime import datetime
from enum import Enum as PyEnum
from uuid import UUID

from sqlalchemy import Boolean, Enum as SqlEnum, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.utils.time import utcnow

from .base import Base, UTCDateTime


class SecuritySeverity(str, PyEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class SecurityAlertType(str, PyEnum):
    BRUTE_FORCE = "BruteForce"
    SUSPICIOUS_LOGIN = "SuspiciousLogin"
    UNAUTHORIZED_ACCESS = "UnauthorizedAccess"
    DATA_EXPORT = "DataExport"
    OTHER = "Other"


class SecurityAlert(Base):
    """Represents a security event raised for the administrative dashboard.

    Alerts are operational records and are excluded from the audit trail.
    """

    __tablename__ = "security_alerts"
    __table_args__ = (
        Index("ix_security_alerts_severity_resolved", "severity", "is_resolved"),
        Index("ix_security_alerts_detected_resolved", "detected_at", "is_resolved"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    severity: Mapped[SecuritySeverity] = mapped_column(SqlEnum(SecuritySeverity), nullable=False, index=True)
    alert_type: Mapped[SecurityAlertType] = mapped_column(SqlEnum(SecurityAlertType), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(2000), nullable=False)
    source: Mapped[str | None] = mapped_column(String(200), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    affected_user_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    affected_user_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    resolved_by_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)
    resolved_by_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    resolution_notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    detected_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, nullable=False, index=True)
