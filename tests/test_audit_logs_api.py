from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from app.core.context import CurrentUser, bind_current_user
from app.models import Category


def _seed(db_session, make_question):
    bind_current_user(db_session, CurrentUser(user_id=uuid4(), display_name="alice"))
    question = make_question(title="Winter tyres?")
    db_session.commit()
    question.title = "Winter tyres in March?"
    db_session.commit()

    bind_current_user(db_session, CurrentUser(user_id=uuid4(), display_name="bob"))
    db_session.add(Category(name="Maintenance", slug="maintenance"))
    db_session.commit()
    bind_current_user(db_session, None)
    return question


@pytest.mark.anyio("asyncio")
async def test_requires_authenticated_admin(client):
    response = await client.get("/admin/audit-logs")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"

    response = await client.get(
        "/admin/audit-logs",
        headers={"X-User-Id": str(uuid4()), "X-User-Name": "carol", "X-User-Roles": "Member"},
    )
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_ROLE"


@pytest.mark.anyio("asyncio")
async def test_invalid_user_id_header(client):
    response = await client.get(
        "/admin/audit-logs",
        headers={"X-User-Id": "not-a-uuid", "X-User-Roles": "Admin"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_USER_ID"


@pytest.mark.anyio("asyncio")
async def test_list_and_filter_entries(client, admin_headers, db_session, make_question):
    question = _seed(db_session, make_question)

    response = await client.get("/admin/audit-logs", headers=admin_headers)
    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 3
    assert payload["page"] == 1
    assert len(payload["items"]) == 3

    response = await client.get(
        "/admin/audit-logs",
        headers=admin_headers,
        params={"entity_name": "Question", "action": "Update"},
    )
    [entry] = response.json()["items"]
    assert entry["entity_id"] == str(question.id)
    assert entry["affected_columns"] == "title"
    assert entry["user_name"] == "alice"

    response = await client.get("/admin/audit-logs", headers=admin_headers, params={"user_name": "bo"})
    [entry] = response.json()["items"]
    assert entry["entity_name"] == "Category"
    assert entry["action"] == "Create"


@pytest.mark.anyio("asyncio")
async def test_pagination_is_capped(client, admin_headers, db_session, make_question, monkeypatch):
    _seed(db_session, make_question)

    response = await client.get(
        "/admin/audit-logs", headers=admin_headers, params={"page": 2, "page_size": 2}
    )
    payload = response.json()
    assert payload["total"] == 3
    assert len(payload["items"]) == 1

    from app.config import get_settings

    monkeypatch.setattr(get_settings(), "AUDIT_LOG_MAX_PAGE_SIZE", 1)
    response = await client.get("/admin/audit-logs", headers=admin_headers, params={"page_size": 50})
    payload = response.json()
    assert payload["page_size"] == 1
    assert len(payload["items"]) == 1


@pytest.mark.anyio("asyncio")
async def test_get_entry_by_id(client, admin_headers, db_session, make_question):
    _seed(db_session, make_question)
    listing = (await client.get("/admin/audit-logs", headers=admin_headers)).json()
    entry_id = listing["items"][0]["id"]

    response = await client.get(f"/admin/audit-logs/{entry_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["id"] == entry_id
    assert datetime.fromisoformat(response.json()["created_at"]).utcoffset() == timedelta(0)

    response = await client.get(f"/admin/audit-logs/{uuid4()}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "AUDIT_LOG_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_dashboard_lookups(client, admin_headers, db_session, make_question):
    _seed(db_session, make_question)

    entities = await client.get("/admin/audit-logs/entities", headers=admin_headers)
    assert entities.json() == ["Category", "Question"]

    actions = await client.get("/admin/audit-logs/actions", headers=admin_headers)
    assert actions.json() == ["Create", "Update"]

    stats = await client.get("/admin/audit-logs/stats", headers=admin_headers, params={"days": 7})
    assert stats.json() == {"Create": 2, "Update": 1}
