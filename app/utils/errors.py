"""Utility helpers for standardized error responses."""
from typing import Any

from fastapi import HTTPException


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a standardized error payload."""

    payload: dict[str, Any] = {"error": {"code": code, "message": message}}
    if details:
        payload["error"]["details"] = details
    return payload


def http_error(status_code: int, code: str, message: str, details: dict[str, Any] | None = None) -> HTTPException:
    """Build an ``HTTPException`` carrying the standard error envelope."""

    return HTTPException(status_code=status_code, detail=error_response(code, message, details))


__all__ = ["error_response", "http_error"]
