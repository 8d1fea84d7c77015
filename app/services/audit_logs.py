"""Audit trail services: manual entries and read-side queries for the dashboard."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping
from uuid import UUID, uuid4

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.context import SYSTEM_ACTOR, CurrentUser
from app.models.audit import AuditLog
from app.utils.audit import join_columns, serialize_values
from app.utils.time import days_ago, ensure_utc, utcnow

logger = logging.getLogger(__name__)


@dataclass
class AuditLogFilter:
    user_name: str | None = None
    entity_name: str | None = None
    entity_id: str | None = None
    action: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


def _apply_filter(stmt, filters: AuditLogFilter):
    if filters.user_name:
        stmt = stmt.where(AuditLog.user_name.contains(filters.user_name))
    if filters.entity_name:
        stmt = stmt.where(AuditLog.entity_name == filters.entity_name)
    if filters.entity_id:
        stmt = stmt.where(AuditLog.entity_id == filters.entity_id)
    if filters.action:
        stmt = stmt.where(AuditLog.action == filters.action)
    if filters.start_date is not None:
        stmt = stmt.where(AuditLog.created_at >= ensure_utc(filters.start_date))
    if filters.end_date is not None:
        stmt = stmt.where(AuditLog.created_at <= ensure_utc(filters.end_date))
    return stmt


def log_action(
    db: Session,
    *,
    user: CurrentUser | None,
    entity_name: str,
    entity_id: str,
    action: str,
    description: str | None = None,
    old_values: Mapping[str, Any] | None = None,
    new_values: Mapping[str, Any] | None = None,
) -> AuditLog:
    """Record an action that is not a row change (export, login, bulk job).

    The entry is added to ``db`` and committed with the caller's transaction.
    """

    actor = user.actor_name if user is not None else SYSTEM_ACTOR
    mask = get_settings().AUDIT_MASK_SENSITIVE_VALUES
    changed = list(dict.fromkeys([*(old_values or {}), *(new_values or {})]))
    entry = AuditLog(
        id=uuid4(),
        user_id=user.user_id if user is not None else None,
        user_name=actor,
        entity_name=entity_name,
        entity_id=entity_id,
        action=action,
        description=description,
        old_values=serialize_values(old_values or {}, mask=mask),
        new_values=serialize_values(new_values or {}, mask=mask),
        affected_columns=join_columns(changed),
        created_at=utcnow(),
        created_by=actor,
    )
    db.add(entry)
    logger.info("Audit action recorded", extra={"action": action, "entity": entity_name, "actor": actor})
    return entry


def list_audit_logs(
    db: Session,
    filters: AuditLogFilter | None = None,
    *,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[AuditLog], int]:
    """Return one page of matching entries (newest first) and the total match count."""

    filters = filters or AuditLogFilter()
    page = max(page, 1)
    page_size = max(page_size, 1)

    total = db.scalar(_apply_filter(select(func.count(AuditLog.id)), filters)) or 0
    stmt = (
        _apply_filter(select(AuditLog), filters)
        .order_by(AuditLog.created_at.desc(), AuditLog.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(db.scalars(stmt).all()), total


def get_audit_log(db: Session, audit_log_id: UUID) -> AuditLog | None:
    return db.get(AuditLog, audit_log_id)


def distinct_entity_names(db: Session) -> list[str]:
    stmt = select(AuditLog.entity_name).distinct().order_by(AuditLog.entity_name)
    return list(db.scalars(stmt).all())


def distinct_actions(db: Session) -> list[str]:
    stmt = select(AuditLog.action).distinct().order_by(AuditLog.action)
    return list(db.scalars(stmt).all())


def action_statistics(db: Session, days: int = 30) -> dict[str, int]:
    """Count entries per action over the last ``days`` days."""

    stmt = (
        select(AuditLog.action, func.count(AuditLog.id))
        .where(AuditLog.created_at >= days_ago(days))
        .group_by(AuditLog.action)
    )
    stats = {action: count for action, count in db.execute(stmt).all()}
    logger.debug("Audit statistics computed", extra={"days": days, "actions": len(stats)})
    return stats


__all__ = [
    "AuditLogFilter",
    "action_statistics",
    "distinct_actions",
    "distinct_entity_names",
    "get_audit_log",
    "list_audit_logs",
    "log_action",
]
