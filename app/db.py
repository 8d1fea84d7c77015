"""Database configuration and session management."""
from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_settings
from app.core.context import CurrentUser, bind_current_user
from app.models.base import Base
from app.services.audit_interceptor import install_audit_interceptor
from app.services.soft_delete import install_soft_delete_filter

engine: Engine | None = None
SessionLocal: sessionmaker[Session] | None = None


def _engine_kwargs() -> dict[str, object]:
    settings = get_settings()
    if settings.database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {}


def configure_sessionmaker(factory: sessionmaker[Session]) -> sessionmaker[Session]:
    """Attach the audit interceptor and soft-delete filter to ``factory``."""

    install_audit_interceptor(factory)
    install_soft_delete_filter(factory)
    return factory


class AuditedSession(Session):
    """Session class driven by ``AsyncSession``; flushes through the same listeners."""


install_audit_interceptor(AuditedSession)
install_soft_delete_filter(AuditedSession)


def make_async_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Async session factory whose flushes are stamped, soft-deleted and audited."""

    return async_sessionmaker(bind, expire_on_commit=False, sync_session_class=AuditedSession)


def init_engine() -> Engine:
    """Initialise the synchronous SQLAlchemy engine lazily."""

    global engine, SessionLocal
    if engine is None:
        settings = get_settings()
        engine = create_engine(settings.database_url, future=True, echo=False, **_engine_kwargs())
        SessionLocal = configure_sessionmaker(
            sessionmaker(
                bind=engine,
                autoflush=False,
                autocommit=False,
                expire_on_commit=False,
                future=True,
            )
        )
    return engine


def get_engine() -> Engine:
    """Return the active SQLAlchemy engine, creating it if necessary."""

    if engine is None:
        return init_engine()
    return engine


def get_sessionmaker() -> sessionmaker[Session]:
    """Return the configured session factory, initialising the engine on demand."""

    if SessionLocal is None:
        init_engine()
    assert SessionLocal is not None  # for type-checkers
    return SessionLocal


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:  # pragma: no cover - driver specific
    """Ensure SQLite enforces foreign key constraints."""

    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_all() -> None:
    """Create all database tables using the shared declarative metadata."""

    Base.metadata.create_all(bind=get_engine())


def close_engine() -> None:
    """Dispose of the SQLAlchemy engine and reset the session factory."""

    global engine, SessionLocal
    if engine is not None:
        engine.dispose()
        engine = None
        SessionLocal = None


@contextmanager
def session_scope(current_user: CurrentUser | None = None) -> Iterator[Session]:
    """Open a session bound to ``current_user``; commit on success, roll back on error.

    Background jobs pass no user and are recorded as the ``System`` actor.
    """

    session = bind_current_user(get_sessionmaker()(), current_user)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Provide a database session for FastAPI dependencies."""

    session = get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "AuditedSession",
    "configure_sessionmaker",
    "make_async_sessionmaker",
    "create_all",
    "get_db",
    "get_engine",
    "get_sessionmaker",
    "init_engine",
    "close_engine",
    "session_scope",
]
