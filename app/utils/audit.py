"""Audit payload helpers: masking of sensitive values and JSON encoding."""
from __future__ import annotations

import json
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping
from uuid import UUID


SENSITIVE_KEYS = {
    "email",
    "phone_number",
    "password_hash",
    "security_stamp",
}


def _mask_value(key: str, value: Any) -> Any:
    if value is None:
        return None

    if key in {"password_hash", "security_stamp"}:
        return "***"

    if key == "email":
        text = str(value)
        if "@" in text:
            _, domain = text.split("@", 1)
            return f"***@{domain}"
        return "***"

    if key == "phone_number":
        digits = "".join(ch for ch in str(value) if ch.isdigit())
        if len(digits) <= 2:
            return "***"
        return f"***{digits[-2:]}"

    return value


def sanitize_payload_for_audit(data: Any) -> Any:
    """Return a copy of ``data`` with obvious PII fields masked."""

    if isinstance(data, Mapping):
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            masked_value = _mask_value(key, value) if key in SENSITIVE_KEYS else value
            sanitized[key] = sanitize_payload_for_audit(masked_value)
        return sanitized

    if isinstance(data, list):
        return [sanitize_payload_for_audit(item) for item in data]

    return data


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not audit-serializable")


def serialize_values(values: Mapping[str, Any], *, mask: bool = True) -> str | None:
    """Encode a changed-values map as compact JSON, or ``None`` when empty.

    Unsupported value types raise ``TypeError``; callers running inside a flush
    let it propagate so the data change is aborted together with its entry.
    """

    if not values:
        return None
    payload = sanitize_payload_for_audit(dict(values)) if mask else dict(values)
    return json.dumps(payload, default=_json_default, separators=(",", ":"), ensure_ascii=False)


def join_columns(columns: list[str]) -> str | None:
    return ",".join(columns) if columns else None


__all__ = ["SENSITIVE_KEYS", "sanitize_payload_for_audit", "serialize_values", "join_columns"]
