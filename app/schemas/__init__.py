"""Schema package exports."""
from .audit_log import AuditLogPage, AuditLogRead
from .security_alert import SecurityAlertRead

__all__ = [
    "AuditLogPage",
    "AuditLogRead",
    "SecurityAlertRead",
]
