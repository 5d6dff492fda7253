import asyncio
import time
from datetime import date, timedelta

import pytest
from starlette.websockets import WebSocketDisconnect

from devflow.auth.auth_utils import create_access_token
from devflow.endpoints.v1 import ws_api
from devflow.utils.notification_hub import notification_hub
from tests.conftest import auth_headers


def create(client, path, payload, headers):
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def wait_for_connection(user_id: int, timeout: float = 2.0) -> int:
    # The hub registers a socket right after the handshake reply is sent
    deadline = time.monotonic() + timeout
    while notification_hub.connection_count(user_id) == 0 and time.monotonic() < deadline:
        time.sleep(0.01)
    return notification_hub.connection_count(user_id)


def history_length(client, task_id, headers):
    response = client.get(f"/api/tasks/{task_id}/history", headers=headers)
    assert response.status_code == 200
    return len(response.json()["data"])


def test_acme_fix_bug_workflow(client, admin_headers, dev_headers):
    org = create(client, "/api/organizations", {"name": "Acme"}, admin_headers)
    team = create(client, "/api/teams", {"organization_id": org["id"], "name": "Core"}, admin_headers)
    project = create(client, "/api/projects", {"team_id": team["id"], "name": "API"}, admin_headers)
    sprint = create(client, "/api/sprints", {
        "project_id": project["id"],
        "name": "S1",
        "start_date": "2024-01-01",
        "end_date": "2024-01-14",
    }, admin_headers)
    assert sprint["status"] == "completed"

    task = create(client, "/api/tasks", {"sprint_id": sprint["id"], "title": "Fix bug"}, dev_headers)
    assert task["status"] == "todo"
    status_url = f"/api/tasks/{task['id']}/status"

    response = client.patch(status_url, json={"status": "in_progress"}, headers=dev_headers)
    assert response.status_code == 200
    assert history_length(client, task["id"], dev_headers) == 2

    response = client.patch(status_url, json={"status": "done"}, headers=dev_headers)
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_TRANSITION"
    assert "in_progress" in error["message"] and "done" in error["message"]
    assert history_length(client, task["id"], dev_headers) == 2

    assert client.patch(status_url, json={"status": "in_review"}, headers=dev_headers).status_code == 200
    response = client.patch(status_url, json={"status": "done"}, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "done"
    assert history_length(client, task["id"], dev_headers) == 4

    history = client.get(f"/api/tasks/{task['id']}/history", headers=dev_headers).json()["data"]
    assert [(h["from_status"], h["to_status"]) for h in history] == [
        (None, "todo"),
        ("todo", "in_progress"),
        ("in_progress", "in_review"),
        ("in_review", "done"),
    ]


def test_sprint_status_follows_dates(client, admin_headers, sprint):
    today = date.today()
    cases = {
        "past": (today - timedelta(days=20), today - timedelta(days=6), "completed"),
        "current": (today - timedelta(days=2), today + timedelta(days=5), "active"),
        "future": (today + timedelta(days=3), today + timedelta(days=17), "planned"),
    }
    for name, (start, end, expected) in cases.items():
        data = create(client, "/api/sprints", {
            "project_id": sprint.project_id,
            "name": name,
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
        }, admin_headers)
        assert data["status"] == expected
        fetched = client.get(f"/api/sprints/{data['id']}", headers=admin_headers).json()["data"]
        assert fetched["status"] == expected


def test_assignment_and_comment_notifications(client, sprint, developer, other_developer):
    author_headers = auth_headers(developer)
    assignee_headers = auth_headers(other_developer)

    task = create(client, "/api/tasks", {
        "sprint_id": sprint.id,
        "title": "Fix bug",
        "assignee_id": other_developer.id,
    }, author_headers)
    client.patch(f"/api/tasks/{task['id']}/status", json={"status": "in_progress"}, headers=author_headers)
    create(client, f"/api/tasks/{task['id']}/comments", {"content": "On it?"}, author_headers)
    # The assignee commenting on their own task notifies nobody
    create(client, f"/api/tasks/{task['id']}/comments", {"content": "Yes"}, assignee_headers)

    inbox = client.get("/api/notifications", headers=assignee_headers).json()
    assert inbox["pagination"]["total"] == 3
    assert [n["type"] for n in inbox["data"]] == ["comment_added", "task_updated", "task_assigned"]
    assert all(n["link"] == f"/tasks/{task['id']}" for n in inbox["data"])

    count = client.get("/api/notifications/unread-count", headers=assignee_headers).json()
    assert count["data"]["unread_count"] == 3

    author_inbox = client.get("/api/notifications", headers=author_headers).json()
    assert author_inbox["pagination"]["total"] == 0


def test_notification_inbox_endpoints(client, sprint, developer, other_developer):
    author_headers = auth_headers(developer)
    assignee_headers = auth_headers(other_developer)
    for title in ("One", "Two"):
        create(client, "/api/tasks", {
            "sprint_id": sprint.id,
            "title": title,
            "assignee_id": other_developer.id,
        }, author_headers)

    items = client.get("/api/notifications", headers=assignee_headers).json()["data"]
    first_id = items[0]["id"]

    # Someone else's notification looks absent
    assert client.patch(f"/api/notifications/{first_id}/read", headers=author_headers).status_code == 404
    assert client.patch(f"/api/notifications/{first_id}/read", headers=assignee_headers).status_code == 200
    assert client.patch(f"/api/notifications/{first_id}/read", headers=assignee_headers).status_code == 200

    unread = client.get("/api/notifications", params={"is_read": "false"}, headers=assignee_headers).json()
    assert unread["pagination"]["total"] == 1

    assert client.patch("/api/notifications/read-all", headers=assignee_headers).status_code == 200
    count = client.get("/api/notifications/unread-count", headers=assignee_headers).json()
    assert count["data"]["unread_count"] == 0

    assert client.delete(f"/api/notifications/{first_id}", headers=assignee_headers).status_code == 200
    response = client.delete(f"/api/notifications/{first_id}", headers=assignee_headers)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "NOTIFICATION_NOT_FOUND"


def test_websocket_receives_pushed_notification(client, sprint, developer, other_developer):
    with client.websocket_connect(f"/ws/notifications?token={create_access_token(other_developer)}") as ws:
        assert wait_for_connection(other_developer.id) == 1
        create(client, "/api/tasks", {
            "sprint_id": sprint.id,
            "title": "Pushed",
            "assignee_id": other_developer.id,
        }, auth_headers(developer))
        message = ws.receive_json()

    assert message["event"] == "notification"
    assert message["data"]["type"] == "task_assigned"
    assert message["data"]["message"] == "You have been assigned to task: Pushed"


def test_websocket_rejects_bad_token(client):
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws/notifications?token=bogus") as ws:
            ws.receive_json()
    assert exc_info.value.code == 1008


def test_websocket_token_lookup_runs_off_event_loop(client, monkeypatch, developer):
    seen = []
    lookup = ws_api.resolve_user_id

    def recording_lookup(token):
        try:
            asyncio.get_running_loop()
            seen.append("event loop")
        except RuntimeError:
            seen.append("worker thread")
        return lookup(token)

    monkeypatch.setattr(ws_api, "resolve_user_id", recording_lookup)

    with client.websocket_connect(f"/ws/notifications?token={create_access_token(developer)}"):
        assert wait_for_connection(developer.id) == 1

    assert seen == ["worker thread"]
