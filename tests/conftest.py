"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from uuid import UUID, uuid4

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# --- Default environment
os.environ.setdefault("DATABASE_URL", "sqlite:///./communitycar_test.db")
os.environ.setdefault("CC_ENV", "test")

from app.main import app  # noqa: E402
from app.core.context import CurrentUser, bind_current_user  # noqa: E402
from app.db import configure_sessionmaker, get_db  # noqa: E402
from app.models import Base, Question  # noqa: E402

ROOT = Path(__file__).resolve().parents[1]
DB_PATH = Path("./communitycar_test.db")


def _run_migrations() -> None:
    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
    command.upgrade(cfg, "head")


# --- (1) Fresh database file for the test session
if DB_PATH.exists():
    DB_PATH.unlink()

engine = create_engine(
    os.environ["DATABASE_URL"],
    connect_args={"check_same_thread": False},
    future=True,
)
TestingSessionLocal = configure_sessionmaker(
    sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True, expire_on_commit=False)
)

# --- (2) Schema comes from Alembic only
_run_migrations()


def _truncate_all() -> None:
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def alice() -> CurrentUser:
    return CurrentUser(user_id=uuid4(), display_name="alice")


@pytest.fixture
def session_factory(db_session: Session) -> Iterator[Callable[..., Session]]:
    """Open extra sessions (e.g. to observe committed state); all are closed afterwards."""

    opened: list[Session] = []

    def _factory(user: CurrentUser | None = None) -> Session:
        session = bind_current_user(TestingSessionLocal(), user)
        opened.append(session)
        return session

    yield _factory
    for session in opened:
        session.close()


@pytest.fixture
def db_session() -> Iterator[Session]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        _truncate_all()


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {
        "X-User-Id": str(uuid4()),
        "X-User-Name": "admin",
        "X-User-Roles": "Admin",
    }


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_question(db_session: Session) -> Callable[..., Question]:
    """Factory adding a question to ``db_session`` (not committed)."""

    def _factory(
        *,
        title: str = "How do I rotate tyres?",
        slug: str | None = None,
        content: str = "Front to back or crosswise?",
        author_id: UUID | None = None,
    ) -> Question:
        question = Question(
            title=title,
            slug=slug or f"question-{uuid4().hex[:10]}",
            content=content,
            author_id=author_id or uuid4(),
        )
        db_session.add(question)
        return question

    return _factory
