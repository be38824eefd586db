"""Tests for the REST binding."""

import pytest
from fastapi.testclient import TestClient

from nexusmail.app import app
from nexusmail.services.engine_service import EngineService, set_engine_service

from .conftest import ADMIN, ALICE, BOB


def _as(user_id):
    return {"X-Actor-Id": user_id}


@pytest.fixture
def client():
    set_engine_service(EngineService(assistant_enabled=False))
    with TestClient(app) as test_client:
        yield test_client
    set_engine_service(None)


def _broadcast(client, subject="Maintenance"):
    response = client.post("/api/v1/messages", headers=_as(ADMIN), json={
        "recipient_target": "everyone",
        "subject": subject,
        "content": "Server maintenance on Saturday",
        "kind": "broadcast",
        "priority": "high",
    })
    assert response.status_code == 200
    return response.json()


def test_health(client):
    assert client.get("/api/v1/health").json()["status"] == "healthy"
    ready = client.get("/api/v1/health/ready").json()
    assert ready["ready"] is True
    assert ready["assistant_enabled"] is False
    assert ready["assistant_available"] is False


def test_actor_header_required(client):
    assert client.get("/api/v1/messages").status_code == 401
    assert client.get("/api/v1/messages", headers=_as("ghost")).status_code == 401


def test_users(client):
    users = client.get("/api/v1/users").json()
    assert [u["id"] for u in users] == [ADMIN, ALICE, BOB]
    assert client.get("/api/v1/users/me", headers=_as(ALICE)).json()["display_name"] == "Alice Chen"
    assert client.get("/api/v1/users/ghost").status_code == 404


def test_broadcast_scenario(client):
    message = _broadcast(client)

    assert client.get("/api/v1/messages/unread-count", headers=_as(ALICE)).json() == {"unread": 1}
    read = client.post(f"/api/v1/messages/{message['id']}/read", headers=_as(ALICE))
    assert read.json()["is_read"] is True

    assert client.get("/api/v1/messages/unread-count", headers=_as(ALICE)).json() == {"unread": 0}
    assert client.get("/api/v1/messages/unread-count", headers=_as(BOB)).json() == {"unread": 1}
    unread = client.get("/api/v1/messages", params={"filter": "unread"}, headers=_as(BOB)).json()
    assert [m["id"] for m in unread] == [message["id"]]


def test_send_validation_errors(client):
    empty = client.post("/api/v1/messages", headers=_as(ADMIN), json={
        "recipient_target": ALICE, "subject": "", "content": "x",
    })
    assert empty.status_code == 400

    member_broadcast = client.post("/api/v1/messages", headers=_as(ALICE), json={
        "recipient_target": "everyone", "subject": "Hi", "content": "all", "kind": "broadcast",
    })
    assert member_broadcast.status_code == 403


def test_recall(client):
    message = _broadcast(client)
    assert client.delete(f"/api/v1/messages/{message['id']}", headers=_as(ALICE)).status_code == 403
    assert client.delete(f"/api/v1/messages/{message['id']}", headers=_as(ADMIN)).status_code == 200
    assert client.delete(f"/api/v1/messages/{message['id']}", headers=_as(ADMIN)).status_code == 404
    assert client.get(f"/api/v1/messages/{message['id']}", headers=_as(ALICE)).status_code == 404


def test_member_recalls_own_message(client):
    response = client.post("/api/v1/messages", headers=_as(ALICE), json={
        "recipient_target": BOB, "subject": "Lunch", "content": "Noon?", "kind": "personal",
    })
    assert response.status_code == 200
    message_id = response.json()["id"]

    assert client.delete(f"/api/v1/messages/{message_id}", headers=_as(ADMIN)).status_code == 403
    assert client.delete(f"/api/v1/messages/{message_id}", headers=_as(ALICE)).status_code == 200
    assert client.get(f"/api/v1/messages/{message_id}", headers=_as(BOB)).status_code == 404


def test_star_and_read_all(client):
    first = _broadcast(client, "One")
    _broadcast(client, "Two")
    client.post(f"/api/v1/messages/{first['id']}/star", headers=_as(ALICE))
    starred = client.get("/api/v1/messages", params={"filter": "starred"}, headers=_as(ALICE)).json()
    assert [m["subject"] for m in starred] == ["One"]

    assert client.post("/api/v1/messages/read-all", headers=_as(ALICE)).json()["marked"] == 2
    assert client.get("/api/v1/messages/unread-count", headers=_as(ALICE)).json() == {"unread": 0}


def test_stats_admin_only(client):
    _broadcast(client)
    assert client.get("/api/v1/messages/stats", headers=_as(ALICE)).status_code == 403
    stats = client.get("/api/v1/messages/stats", headers=_as(ADMIN)).json()
    assert stats["total_messages"] == 1
    assert stats["broadcast_count"] == 1


def test_templates_flow(client):
    saved = client.post("/api/v1/templates", headers=_as(ADMIN), json={
        "name": "Outage", "subject": "Service outage", "content": "We are investigating", "priority": "high",
    }).json()
    sent = client.post(f"/api/v1/templates/{saved['id']}/send", headers=_as(ADMIN), json={}).json()
    assert sent["subject"] == "Service outage"
    assert sent["kind"] == "broadcast"

    assert client.get("/api/v1/templates", headers=_as(ALICE)).status_code == 403
    assert client.delete(f"/api/v1/templates/{saved['id']}", headers=_as(ADMIN)).status_code == 200
    assert client.delete(f"/api/v1/templates/{saved['id']}", headers=_as(ADMIN)).status_code == 404


def test_chat_flow(client):
    session = client.get("/api/v1/chat/my", headers=_as(ALICE)).json()
    assert client.get("/api/v1/chat/my", headers=_as(ALICE)).json()["id"] == session["id"]
    sid = session["id"]

    posted = client.post(f"/api/v1/chat/sessions/{sid}/messages", headers=_as(ALICE), json={"content": "Help!"})
    assert posted.status_code == 200
    assert client.get("/api/v1/chat/unread", headers=_as(ADMIN)).json() == {"unread": 1}

    # members cannot read other sessions
    assert client.get(f"/api/v1/chat/sessions/{sid}/messages", headers=_as(BOB)).status_code == 403

    read = client.post(f"/api/v1/chat/sessions/{sid}/read", headers=_as(ADMIN)).json()
    assert read["unread_count_for_admin"] == 0

    closed = client.post(f"/api/v1/chat/sessions/{sid}/close", headers=_as(ADMIN), json={"notice": "Resolved"})
    assert closed.json()["status"] == "closed"
    again = client.post(f"/api/v1/chat/sessions/{sid}/close", headers=_as(ADMIN), json={})
    assert again.status_code == 409

    blocked = client.post(f"/api/v1/chat/sessions/{sid}/messages", headers=_as(ALICE), json={"content": "Wait"})
    assert blocked.status_code == 409
    admin_post = client.post(f"/api/v1/chat/sessions/{sid}/messages", headers=_as(ADMIN), json={"content": "Ping"})
    assert admin_post.status_code == 200

    fresh = client.post("/api/v1/chat/my/new", headers=_as(ALICE)).json()
    assert fresh["id"] != sid
    assert fresh["status"] == "active"
    history = client.get("/api/v1/chat/my/history", headers=_as(ALICE)).json()
    assert [s["id"] for s in history] == [sid, fresh["id"]]


def test_chat_unknown_session(client):
    response = client.post("/api/v1/chat/sessions/missing/messages", headers=_as(ADMIN), json={"content": "x"})
    assert response.status_code == 404


def test_assistant_fallbacks(client):
    summary = client.post("/api/v1/assistant/summarize", headers=_as(ALICE), json={"text": "Hello team"})
    assert summary.status_code == 200
    assert summary.json()["summary"].startswith("[System Summary]")

    draft = client.post("/api/v1/assistant/draft", headers=_as(ADMIN), json={"topic": "picnic", "tone": "friendly"})
    assert draft.json()["subject"] == "[Draft] Announcement: picnic"
    assert draft.json()["generated"] is False

    assert client.post("/api/v1/assistant/draft", headers=_as(ALICE), json={"topic": "x"}).status_code == 403
