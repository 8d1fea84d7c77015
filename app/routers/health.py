"""Health check endpoint."""
from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter
from sqlalchemy import text

from app.config import get_settings
from app.db import get_engine, get_sessionmaker
from app.services.audit_interceptor import is_audit_interceptor_installed

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _db_status() -> str:
    """Return 'ok' if the DB answers ``SELECT 1``, 'error' otherwise."""

    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:  # noqa: BLE001
        logger.exception("DB health check failed")
        return "error"
    return "ok"


def _expected_migration_head() -> str | None:
    try:
        config = Config(str(PROJECT_ROOT / "alembic.ini"))
        config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
        return ScriptDirectory.from_config(config).get_current_head()
    except Exception:  # noqa: BLE001
        logger.exception("Failed to load Alembic head revision")
        return None


def _migrations_status() -> tuple[bool, str]:
    """Compare the database revision with the newest script in ``alembic/versions``."""

    expected_head = _expected_migration_head()
    if expected_head is None:
        return False, "unknown"
    try:
        with get_engine().connect() as conn:
            current = conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
    except Exception:  # noqa: BLE001
        logger.exception("Migration check failed")
        return False, "unknown"
    if current == expected_head:
        return True, "up_to_date"
    return False, "out_of_date"


@router.get("", summary="Health check")
def healthcheck() -> dict[str, object]:
    """Report database reachability, schema revision and audit trail wiring."""

    settings = get_settings()
    db_status = _db_status()
    db_ok = db_status == "ok"
    migration_ok, migration_status = _migrations_status() if db_ok else (False, "unknown")
    interceptor_ok = is_audit_interceptor_installed(get_sessionmaker())

    return {
        "status": "ok" if db_ok and migration_ok and interceptor_ok else "degraded",
        "env": settings.app_env,
        "db_ok": db_ok,
        "db_status": db_status,
        "migrations_ok": migration_ok,
        "migrations_status": migration_status,
        "audit": {
            "interceptor_installed": interceptor_ok,
            "mask_sensitive_values": settings.AUDIT_MASK_SENSITIVE_VALUES,
        },
    }
