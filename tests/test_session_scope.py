import pytest
from sqlalchemy import select

from app.db import session_scope
from app.models import AuditLog, Category


def test_session_scope_commits_as_bound_user(db_session, alice):
    with session_scope(alice) as session:
        session.add(Category(name="Events", slug="events"))

    [entry] = db_session.scalars(select(AuditLog)).all()
    assert entry.entity_name == "Category"
    assert entry.user_name == "alice"
    assert entry.user_id == alice.user_id


def test_session_scope_without_user_records_system(db_session):
    with session_scope() as session:
        session.add(Category(name="Jobs", slug="jobs"))

    [entry] = db_session.scalars(select(AuditLog)).all()
    assert entry.user_name == "System"
    assert entry.user_id is None


def test_session_scope_rolls_back_on_error(db_session, alice):
    with pytest.raises(RuntimeError):
        with session_scope(alice) as session:
            session.add(Category(name="Lost", slug="lost"))
            session.flush()
            raise RuntimeError("boom")

    assert db_session.scalars(select(Category)).all() == []
    assert db_session.scalars(select(AuditLog)).all() == []
