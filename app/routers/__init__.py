"""API routers for the CommunityCar backend."""
from fastapi import APIRouter

from . import audit_logs, health, security_alerts


def get_api_router() -> APIRouter:
    """Return the root API router."""

    api_router = APIRouter()
    api_router.include_router(health.router)
    api_router.include_router(audit_logs.router)
    api_router.include_router(security_alerts.router)
    return api_router
