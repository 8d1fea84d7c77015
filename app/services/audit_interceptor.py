"""Flush-time audit interceptor.

Installed as a ``before_flush`` listener on the session factory. For every
pending insert, update and delete it:

* stamps ``created_*`` / ``modified_*`` on :class:`~app.models.base.Auditable` rows,
* rewrites deletes of :class:`~app.models.base.SoftDeletable` rows into flagged updates,
* stages one :class:`~app.models.audit.AuditLog` per change in the same flush.

Nothing here catches exceptions: a value that cannot be serialized aborts the
flush, so a data change is never persisted without its audit entry.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import event, inspect, select
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import NO_VALUE
from sqlalchemy.orm.state import InstanceState

from app.config import get_settings
from app.core.context import SYSTEM_ACTOR, current_user_for
from app.models.audit import AuditAction, AuditLog
from app.models.base import AUDIT_STAMP_COLUMNS, Auditable, SoftDeletable
from app.models.security_alert import SecurityAlert
from app.services.soft_delete import INCLUDE_DELETED
from app.utils.audit import join_columns, serialize_values
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

# Recording these would make every flush produce further auditable rows.
NON_AUDITED_TYPES: tuple[type, ...] = (AuditLog, SecurityAlert)


def has_changed_owned_objects(obj: Any) -> bool:
    """Return True when a composite value object of ``obj`` has pending changes."""

    state = inspect(obj)
    for composite_prop in state.mapper.composites:
        for column_prop in composite_prop.props:
            if state.attrs[column_prop.key].history.has_changes():
                return True
    return False


def _apply_insert_defaults(obj: Any) -> None:
    """Fill client-side defaults so the ``Create`` snapshot matches the inserted row."""

    state = inspect(obj)
    if getattr(obj, "id", None) is None:
        obj.id = uuid4()
    for prop in state.mapper.column_attrs:
        column = prop.columns[0]
        if column.primary_key or column.default is None or not column.default.is_scalar:
            continue
        if getattr(obj, prop.key) is None:
            setattr(obj, prop.key, column.default.arg)


def _stored_values(state: InstanceState, keys: list[str]) -> dict[str, Any]:
    """Read ``keys`` of the stored row when their pre-change value is not in memory.

    An attribute assigned while expired (``expire()``, ``refresh()`` or
    ``expire_on_commit``) keeps no previous value in its history.
    """

    if not keys:
        return {}
    mapper = state.mapper
    stmt = (
        select(*(mapper.attrs[key].columns[0] for key in keys))
        .where(*(column == value for column, value in zip(mapper.primary_key, state.identity)))
        .execution_options(**{INCLUDE_DELETED: True})
    )
    session = state.session
    with session.no_autoflush:
        row = session.execute(stmt).one()
    return dict(zip(keys, row))


def _capture_values(
    state: InstanceState, action: AuditAction
) -> tuple[dict[str, Any], dict[str, Any], list[str]]:
    keys = [
        prop.key
        for prop in state.mapper.column_attrs
        if not any(column.primary_key for column in prop.columns)
    ]

    if action is AuditAction.CREATE:
        return {}, {key: state.attrs[key].value for key in keys}, keys

    if action is AuditAction.SOFT_DELETE:
        known: dict[str, Any] = {}
        missing: list[str] = []
        for key in keys:
            if key in state.committed_state:
                original = state.committed_state[key]
            else:
                original = state.dict.get(key, NO_VALUE)
            if original is NO_VALUE:
                missing.append(key)
            else:
                known[key] = original
        known.update(_stored_values(state, missing))
        return {key: known[key] for key in keys}, {}, keys

    changes: dict[str, list[Any]] = {}
    missing = []
    for key in keys:
        if key in AUDIT_STAMP_COLUMNS:
            continue
        history = state.attrs[key].history
        if not history.has_changes():
            continue
        new_value = history.added[0] if history.added else None
        if history.deleted:
            changes[key] = [history.deleted[0], new_value]
        else:
            changes[key] = [None, new_value]
            missing.append(key)
    for key, stored in _stored_values(state, missing).items():
        changes[key][0] = stored

    old_values: dict[str, Any] = {}
    new_values: dict[str, Any] = {}
    affected: list[str] = []
    for key, (old_value, new_value) in changes.items():
        if key in missing and old_value == new_value:
            continue
        old_values[key] = old_value
        new_values[key] = new_value
        affected.append(key)
    return old_values, new_values, affected


def _entity_id(state: InstanceState) -> str:
    if state.key is not None:
        values = state.identity
    else:
        values = state.mapper.primary_key_from_instance(state.obj())
    if not values or any(value is None for value in values):
        return "0"
    return ",".join(str(value) for value in values)


def build_audit_entry(
    obj: Any,
    action: AuditAction,
    *,
    actor: str,
    user_id: UUID | None,
    now: datetime,
    mask: bool = True,
) -> AuditLog | None:
    """Describe the pending change of ``obj``.

    Returns ``None`` for records that are never audited and for updates that
    turn out to leave every stored value unchanged.
    """

    if isinstance(obj, NON_AUDITED_TYPES):
        return None

    state = inspect(obj)
    old_values, new_values, affected = _capture_values(state, action)
    if action is AuditAction.UPDATE and not affected:
        return None
    return AuditLog(
        id=uuid4(),
        user_id=user_id,
        user_name=actor,
        entity_name=type(obj).__name__,
        entity_id=_entity_id(state),
        action=action.value,
        old_values=serialize_values(old_values, mask=mask),
        new_values=serialize_values(new_values, mask=mask),
        affected_columns=join_columns(affected),
        created_at=now,
        created_by=actor,
    )


def process_pending_changes(session: Session) -> list[AuditLog]:
    """Stamp, soft-delete and audit everything pending in ``session``.

    The staged entries are added to ``session`` and also returned.
    """

    now = utcnow()
    user = current_user_for(session)
    actor = user.actor_name if user is not None else SYSTEM_ACTOR
    user_id = user.user_id if user is not None else None
    mask = get_settings().AUDIT_MASK_SENSITIVE_VALUES

    entries: list[AuditLog] = []

    def _stage(obj: Any, action: AuditAction) -> None:
        entry = build_audit_entry(obj, action, actor=actor, user_id=user_id, now=now, mask=mask)
        if entry is not None:
            entries.append(entry)

    for obj in list(session.new):
        _apply_insert_defaults(obj)
        if isinstance(obj, Auditable):
            obj.created_at = now
            obj.created_by = actor
        _stage(obj, AuditAction.CREATE)

    for obj in list(session.dirty):
        modified = session.is_modified(obj, include_collections=False)
        if not modified and not has_changed_owned_objects(obj):
            continue
        if isinstance(obj, Auditable):
            obj.modified_at = now
            obj.modified_by = actor
        _stage(obj, AuditAction.UPDATE)

    for obj in list(session.deleted):
        if not isinstance(obj, SoftDeletable):
            continue
        # re-adding a persistent instance cancels its pending DELETE
        session.add(obj)
        obj.is_deleted = True
        obj.deleted_at = now
        obj.deleted_by = actor
        _stage(obj, AuditAction.SOFT_DELETE)

    if entries:
        session.add_all(entries)
        logger.debug("Staged audit entries", extra={"count": len(entries), "actor": actor})
    return entries


def _before_flush(session: Session, flush_context: Any, instances: Any) -> None:
    process_pending_changes(session)


def install_audit_interceptor(target: Any) -> None:
    """Register the interceptor on a ``Session`` subclass or ``sessionmaker``."""

    if not is_audit_interceptor_installed(target):
        event.listen(target, "before_flush", _before_flush)


def is_audit_interceptor_installed(target: Any) -> bool:
    return event.contains(target, "before_flush", _before_flush)


def uninstall_audit_interceptor(target: Any) -> None:
    if is_audit_interceptor_installed(target):
        event.remove(target, "before_flush", _before_flush)


__all__ = [
    "NON_AUDITED_TYPES",
    "build_audit_entry",
    "has_changed_owned_objects",
    "install_audit_interceptor",
    "is_audit_interceptor_installed",
    "process_pending_changes",
    "uninstall_audit_interceptor",
]
