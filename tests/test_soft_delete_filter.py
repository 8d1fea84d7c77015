from sqlalchemy import select

from app.models import Question


def test_soft_deleted_rows_are_hidden_from_queries(db_session, make_question, session_factory):
    kept = make_question(title="Still open")
    removed = make_question(title="Spam")
    db_session.commit()

    db_session.delete(removed)
    db_session.commit()

    reader = session_factory()
    visible = reader.scalars(select(Question)).all()
    assert [question.id for question in visible] == [kept.id]
    assert reader.get(Question, removed.id) is None

    everything = reader.scalars(select(Question).execution_options(include_deleted=True)).all()
    assert {question.id for question in everything} == {kept.id, removed.id}
    flagged = next(question for question in everything if question.id == removed.id)
    assert flagged.is_deleted is True
    assert flagged.deleted_by == "System"


def test_deleting_twice_keeps_a_single_row(db_session, make_question, session_factory):
    question = make_question()
    db_session.commit()

    db_session.delete(question)
    db_session.commit()
    db_session.delete(question)
    db_session.commit()

    reader = session_factory()
    rows = reader.scalars(
        select(Question).where(Question.id == question.id).execution_options(include_deleted=True)
    ).all()
    assert len(rows) == 1
    assert rows[0].is_deleted is True
