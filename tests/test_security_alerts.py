from uuid import uuid4

import pytest

from app.core.context import CurrentUser
from app.models import SecurityAlertType, SecuritySeverity
from app.services.security_alerts import (
    create_security_alert,
    list_security_alerts,
    reopen_security_alert,
    resolve_security_alert,
)


def _raise(db_session, severity, title="Repeated failed logins"):
    return create_security_alert(
        db_session,
        title=title,
        description="12 failures in 60 seconds",
        severity=severity,
        alert_type=SecurityAlertType.BRUTE_FORCE,
        source="auth-gateway",
    )


def test_resolve_and_reopen(db_session):
    alert = _raise(db_session, SecuritySeverity.HIGH)
    assert alert.is_resolved is False
    assert alert.detected_at is not None

    resolver = CurrentUser(display_name="sec-admin")
    resolve_security_alert(db_session, alert, resolved_by=resolver, notes="IP blocked")
    assert alert.is_resolved is True
    assert alert.resolved_by_name == "sec-admin"
    assert alert.resolved_at is not None
    assert alert.resolution_notes == "IP blocked"

    reopen_security_alert(db_session, alert)
    assert alert.is_resolved is False
    assert alert.resolved_by_name is None
    assert alert.resolved_at is None


def test_list_filters_by_severity_and_state(db_session):
    high = _raise(db_session, SecuritySeverity.HIGH)
    _raise(db_session, SecuritySeverity.LOW, title="Unusual user agent")
    resolve_security_alert(db_session, high, resolved_by=CurrentUser())

    assert [a.id for a in list_security_alerts(db_session, severity=SecuritySeverity.HIGH)] == [high.id]
    unresolved = list_security_alerts(db_session, is_resolved=False)
    assert [a.title for a in unresolved] == ["Unusual user agent"]
    assert high.resolved_by_name == "System"


@pytest.mark.anyio("asyncio")
async def test_alerts_api(client, admin_headers, db_session):
    _raise(db_session, SecuritySeverity.CRITICAL)
    _raise(db_session, SecuritySeverity.LOW, title="Unusual user agent")

    response = await client.get(
        "/admin/security-alerts", headers=admin_headers, params={"severity": "Critical"}
    )
    assert response.status_code == 200
    [alert] = response.json()
    assert alert["severity"] == "Critical"
    assert alert["alert_type"] == "BruteForce"

    officer = dict(admin_headers, **{"X-User-Roles": "SecurityOfficer"})
    response = await client.get("/admin/security-alerts", headers=officer)
    assert response.status_code == 200
    assert len(response.json()) == 2

    member = dict(admin_headers, **{"X-User-Roles": "Member"})
    response = await client.get("/admin/security-alerts", headers=member)
    assert response.status_code == 403


@pytest.mark.anyio("asyncio")
async def test_get_alert_by_id(client, admin_headers, db_session):
    alert = _raise(db_session, SecuritySeverity.MEDIUM)

    response = await client.get(f"/admin/security-alerts/{alert.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Repeated failed logins"

    response = await client.get(f"/admin/security-alerts/{uuid4()}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "SECURITY_ALERT_NOT_FOUND"
