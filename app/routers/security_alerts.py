"""Security alert endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.models.security_alert import SecurityAlert, SecuritySeverity
from app.schemas.security_alert import SecurityAlertRead
from app.security import ADMIN_ROLE, get_request_db, require_roles
from app.services.security_alerts import list_security_alerts
from app.utils.errors import http_error

SECURITY_OFFICER_ROLE = "SecurityOfficer"

router = APIRouter(
    prefix="/admin/security-alerts",
    tags=["security-alerts"],
    dependencies=[Depends(require_roles({ADMIN_ROLE, SECURITY_OFFICER_ROLE}))],
)


@router.get("", response_model=list[SecurityAlertRead], status_code=status.HTTP_200_OK)
def list_alerts(
    severity: SecuritySeverity | None = Query(default=None),
    resolved: bool | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_request_db),
) -> list[SecurityAlert]:
    return list_security_alerts(db, severity=severity, is_resolved=resolved, limit=limit)


@router.get("/{alert_id}", response_model=SecurityAlertRead)
def get_alert(alert_id: UUID, db: Session = Depends(get_request_db)) -> SecurityAlert:
    alert = db.get(SecurityAlert, alert_id)
    if alert is None:
        raise http_error(status.HTTP_404_NOT_FOUND, "SECURITY_ALERT_NOT_FOUND", "Security alert not found.")
    return alert
