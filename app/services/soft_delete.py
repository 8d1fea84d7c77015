"""Global query filter hiding soft-deleted rows."""
from __future__ import annotations

from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import ORMExecuteState, with_loader_criteria

from app.models.base import SoftDeletable

INCLUDE_DELETED = "include_deleted"


def _exclude_soft_deleted(execute_state: ORMExecuteState) -> None:
    if (
        execute_state.is_select
        and not execute_state.is_column_load
        and not execute_state.is_relationship_load
        and not execute_state.execution_options.get(INCLUDE_DELETED, False)
    ):
        execute_state.statement = execute_state.statement.options(
            with_loader_criteria(
                SoftDeletable,
                lambda cls: cls.is_deleted.is_(False),
                include_aliases=True,
            )
        )


def install_soft_delete_filter(target: Any) -> None:
    """Register the filter on a ``Session`` subclass or ``sessionmaker``.

    Statements opt out with ``.execution_options(include_deleted=True)``.
    """

    if not event.contains(target, "do_orm_execute", _exclude_soft_deleted):
        event.listen(target, "do_orm_execute", _exclude_soft_deleted)


__all__ = ["INCLUDE_DELETED", "install_soft_delete_filter"]
