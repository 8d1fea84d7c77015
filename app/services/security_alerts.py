"""Security alert service helpers."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.context import CurrentUser
from app.models.security_alert import SecurityAlert, SecurityAlertType, SecuritySeverity
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


def create_security_alert(
    db: Session,
    *,
    title: str,
    description: str,
    severity: SecuritySeverity,
    alert_type: SecurityAlertType = SecurityAlertType.OTHER,
    source: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    affected_user_id: UUID | None = None,
    affected_user_name: str | None = None,
) -> SecurityAlert:
    """Persist a security alert in the database."""

    alert = SecurityAlert(
        title=title,
        description=description,
        severity=severity,
        alert_type=alert_type,
        source=source,
        ip_address=ip_address,
        user_agent=user_agent,
        affected_user_id=affected_user_id,
        affected_user_name=affected_user_name,
        is_resolved=False,
        detected_at=utcnow(),
    )
    db.add(alert)
    db.commit()
    db.refresh(alert)
    logger.warning(
        "Security alert raised",
        extra={"severity": severity.value, "type": alert_type.value, "source": source},
    )
    return alert


def resolve_security_alert(
    db: Session, alert: SecurityAlert, *, resolved_by: CurrentUser, notes: str | None = None
) -> SecurityAlert:
    alert.is_resolved = True
    alert.resolved_by_id = resolved_by.user_id
    alert.resolved_by_name = resolved_by.actor_name
    alert.resolved_at = utcnow()
    alert.resolution_notes = notes
    db.commit()
    logger.info("Security alert resolved", extra={"alert_id": str(alert.id), "by": resolved_by.actor_name})
    return alert


def reopen_security_alert(db: Session, alert: SecurityAlert) -> SecurityAlert:
    alert.is_resolved = False
    alert.resolved_by_id = None
    alert.resolved_by_name = None
    alert.resolved_at = None
    alert.resolution_notes = None
    db.commit()
    logger.info("Security alert reopened", extra={"alert_id": str(alert.id)})
    return alert


def list_security_alerts(
    db: Session,
    *,
    severity: SecuritySeverity | None = None,
    is_resolved: bool | None = None,
    limit: int = 50,
) -> list[SecurityAlert]:
    stmt = select(SecurityAlert)
    if severity is not None:
        stmt = stmt.where(SecurityAlert.severity == severity)
    if is_resolved is not None:
        stmt = stmt.where(SecurityAlert.is_resolved == is_resolved)
    stmt = stmt.order_by(SecurityAlert.detected_at.desc()).limit(limit)
    return list(db.scalars(stmt).all())
