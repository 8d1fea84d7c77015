"""Audit log reporting endpoints."""
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.audit import AuditLog
from app.schemas.audit_log import AuditLogPage, AuditLogRead
from app.security import ADMIN_ROLE, get_request_db, require_roles
from app.services.audit_logs import (
    AuditLogFilter,
    action_statistics,
    distinct_actions,
    distinct_entity_names,
    get_audit_log,
    list_audit_logs,
)
from app.utils.errors import http_error

router = APIRouter(
    prefix="/admin/audit-logs",
    tags=["audit-logs"],
    dependencies=[Depends(require_roles({ADMIN_ROLE}))],
)


@router.get("", response_model=AuditLogPage, status_code=status.HTTP_200_OK)
def list_entries(
    user_name: str | None = Query(default=None),
    entity_name: str | None = Query(default=None),
    entity_id: str | None = Query(default=None),
    action: str | None = Query(default=None),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1),
    db: Session = Depends(get_request_db),
) -> AuditLogPage:
    page_size = min(page_size, get_settings().AUDIT_LOG_MAX_PAGE_SIZE)
    filters = AuditLogFilter(
        user_name=user_name,
        entity_name=entity_name,
        entity_id=entity_id,
        action=action,
        start_date=start_date,
        end_date=end_date,
    )
    items, total = list_audit_logs(db, filters, page=page, page_size=page_size)
    return AuditLogPage(
        items=[AuditLogRead.model_validate(item) for item in items],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/entities", response_model=list[str])
def list_entity_names(db: Session = Depends(get_request_db)) -> list[str]:
    return distinct_entity_names(db)


@router.get("/actions", response_model=list[str])
def list_actions(db: Session = Depends(get_request_db)) -> list[str]:
    return distinct_actions(db)


@router.get("/stats", response_model=dict[str, int])
def statistics(days: int = Query(default=30, ge=1, le=365), db: Session = Depends(get_request_db)) -> dict[str, int]:
    return action_statistics(db, days=days)


@router.get("/{audit_log_id}", response_model=AuditLogRead)
def get_entry(audit_log_id: UUID, db: Session = Depends(get_request_db)) -> AuditLog:
    entry = get_audit_log(db, audit_log_id)
    if entry is None:
        raise http_error(status.HTTP_404_NOT_FOUND, "AUDIT_LOG_NOT_FOUND", "Audit log entry not found.")
    return entry
