import json
import os
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.context import bind_current_user
from app.db import make_async_sessionmaker
from app.models import AuditLog, Question

ASYNC_DATABASE_URL = os.environ["DATABASE_URL"].replace("sqlite://", "sqlite+aiosqlite://", 1)


@pytest.fixture
async def async_factory(db_session):
    engine = create_async_engine(ASYNC_DATABASE_URL)
    yield make_async_sessionmaker(engine)
    await engine.dispose()


@pytest.mark.anyio("asyncio")
async def test_async_flushes_are_stamped_and_audited(async_factory, db_session, alice):
    async with async_factory() as session:
        bind_current_user(session, alice)
        question = Question(title="Async A", slug="async-a", content="...", author_id=uuid4())
        session.add(question)
        await session.commit()

        question.title = "Async B"
        await session.commit()

        await session.delete(question)
        await session.commit()
        question_id = question.id

    entries = db_session.scalars(
        select(AuditLog).where(AuditLog.entity_id == str(question_id)).order_by(AuditLog.created_at)
    ).all()
    assert [entry.action for entry in entries] == ["Create", "Update", "SoftDelete"]
    assert {entry.user_name for entry in entries} == {"alice"}
    assert json.loads(entries[1].old_values) == {"title": "Async A"}
    assert question.created_by == "alice"
    assert question.deleted_by == "alice"


@pytest.mark.anyio("asyncio")
async def test_async_queries_hide_soft_deleted_rows(async_factory, make_question, db_session):
    question = make_question()
    db_session.commit()
    db_session.delete(question)
    db_session.commit()

    async with async_factory() as session:
        assert await session.get(Question, question.id) is None
        rows = (
            await session.scalars(select(Question).execution_options(include_deleted=True))
        ).all()
        assert [row.id for row in rows] == [question.id]
