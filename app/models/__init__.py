"""ORM models package."""
from .audit import AuditAction, AuditLog
from .base import AUDIT_STAMP_COLUMNS, Auditable, Base, SoftDeletable
from .category import Category
from .map_point import Location, MapPoint, MapPointStatus, MapPointType
from .question import Question
from .security_alert import SecurityAlert, SecurityAlertType, SecuritySeverity

__all__ = [
    "AUDIT_STAMP_COLUMNS",
    "AuditAction",
    "AuditLog",
    "Auditable",
    "Base",
    "Category",
    "Location",
    "MapPoint",
    "MapPointStatus",
    "MapPointType",
    "Question",
    "SecurityAlert",
    "SecurityAlertType",
    "SecuritySeverity",
    "SoftDeletable",
]
