import logging

import pytest

from app import main as main_module
from app.config import get_settings


def test_startup_accepts_audited_session_factory():
    main_module._assert_audit_trail_wired(get_settings())


def test_startup_refuses_unaudited_session_factory(monkeypatch):
    monkeypatch.setattr(main_module, "is_audit_interceptor_installed", lambda target: False)

    with pytest.raises(RuntimeError, match="not audited"):
        main_module._assert_audit_trail_wired(get_settings())


def test_startup_warns_when_masking_is_disabled(monkeypatch, caplog):
    settings = get_settings()
    monkeypatch.setattr(settings, "AUDIT_MASK_SENSITIVE_VALUES", False)

    with caplog.at_level(logging.WARNING, logger="app.main"):
        main_module._assert_audit_trail_wired(settings)

    assert "unmasked" in caplog.text
