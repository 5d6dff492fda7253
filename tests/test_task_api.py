import pytest
from fastapi.testclient import TestClient

from devflow.main import app
from devflow.utils.task_service import TaskService
from tests.conftest import auth_headers


@pytest.fixture
def task(client, sprint, dev_headers):
    response = client.post("/api/tasks", json={"sprint_id": sprint.id, "title": "Fix bug"}, headers=dev_headers)
    assert response.status_code == 201
    return response.json()["data"]


def test_create_task_envelope(client, sprint, developer, dev_headers):
    response = client.post("/api/tasks", json={
        "sprint_id": sprint.id,
        "title": "Write docs",
        "priority": "high",
        "story_points": 3,
        "status": "done",
    }, headers=dev_headers)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Task created successfully"
    assert body["data"]["status"] == "todo"
    assert body["data"]["priority"] == "high"
    assert body["data"]["creator_id"] == developer.id


def test_create_task_validation(client, sprint, dev_headers):
    response = client.post("/api/tasks", json={"sprint_id": sprint.id, "title": "", "story_points": -1},
                           headers=dev_headers)

    assert response.status_code == 400
    details = response.json()["error"]["details"]
    assert "title" in details and "story_points" in details


def test_create_task_missing_sprint(client, dev_headers):
    response = client.post("/api/tasks", json={"sprint_id": 999, "title": "Lost"}, headers=dev_headers)

    assert response.status_code == 404
    assert response.json()["error"] == {"message": "Sprint not found", "code": "SPRINT_NOT_FOUND"}


def test_list_tasks_pagination(client, sprint, dev_headers):
    for i in range(3):
        client.post("/api/tasks", json={"sprint_id": sprint.id, "title": f"Task {i}"}, headers=dev_headers)

    body = client.get("/api/tasks", params={"page": 1, "limit": 2, "sprint_id": sprint.id},
                      headers=dev_headers).json()

    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}


def test_list_tasks_rejects_unknown_sort_field(client, dev_headers):
    response = client.get("/api/tasks", params={"sortBy": "id; DROP TABLE tasks"}, headers=dev_headers)
    assert response.status_code == 400


def test_list_tasks_sort_and_search(client, sprint, dev_headers):
    for title in ("beta", "alpha", "gamma"):
        client.post("/api/tasks", json={"sprint_id": sprint.id, "title": title}, headers=dev_headers)

    body = client.get("/api/tasks", params={"sortBy": "title"}, headers=dev_headers).json()
    assert [t["title"] for t in body["data"]] == ["gamma", "beta", "alpha"]

    body = client.get("/api/tasks", params={"search": "ALP"}, headers=dev_headers).json()
    assert [t["title"] for t in body["data"]] == ["alpha"]


def test_get_update_delete_task(client, task, dev_headers):
    url = f"/api/tasks/{task['id']}"

    assert client.get(url, headers=dev_headers).json()["data"]["title"] == "Fix bug"

    response = client.patch(url, json={
        "title": "Fix the bug",
        "github_pr_url": "https://github.com/acme/api/pull/1",
        "github_pr_status": "open",
    }, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Fix the bug"
    assert response.json()["data"]["github_pr_status"] == "open"

    assert client.delete(url, headers=dev_headers).status_code == 200
    response = client.get(url, headers=dev_headers)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "TASK_NOT_FOUND"
    assert client.delete(url, headers=dev_headers).status_code == 404


def test_patch_status_is_raw_overwrite(client, task, dev_headers):
    url = f"/api/tasks/{task['id']}"

    response = client.patch(url, json={"status": "done"}, headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "done"

    history = client.get(f"{url}/history", headers=dev_headers).json()["data"]
    assert history[-1]["from_status"] == "todo"
    assert history[-1]["to_status"] == "done"

    assert client.patch(url, json={"status": "archived"}, headers=dev_headers).status_code == 400


@pytest.mark.parametrize("field", ["title", "status", "priority"])
def test_patch_rejects_null_on_required_field(client, task, dev_headers, field):
    url = f"/api/tasks/{task['id']}"

    response = client.patch(url, json={field: None}, headers=dev_headers)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert field in error["details"]
    assert client.get(url, headers=dev_headers).json()["data"][field] == task[field]


def test_patch_allows_null_on_optional_field(client, task, dev_headers):
    url = f"/api/tasks/{task['id']}"
    client.patch(url, json={"description": "Steps to reproduce"}, headers=dev_headers)

    response = client.patch(url, json={"description": None}, headers=dev_headers)

    assert response.status_code == 200
    assert response.json()["data"]["description"] is None


def test_hierarchy_updates_reject_null_names(client, sprint, admin_headers, lead_headers):
    project = sprint.project
    team = project.team
    cases = [
        (f"/api/organizations/{team.organization_id}", {"name": None}, admin_headers),
        (f"/api/teams/{team.id}", {"name": None}, lead_headers),
        (f"/api/projects/{project.id}", {"name": None}, lead_headers),
        (f"/api/sprints/{sprint.id}", {"start_date": None}, lead_headers),
    ]

    for url, body, headers in cases:
        response = client.patch(url, json=body, headers=headers)
        assert response.status_code == 400, url
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_status_endpoint_rejects_unknown_status(client, task, dev_headers):
    response = client.patch(f"/api/tasks/{task['id']}/status", json={"status": "blocked"}, headers=dev_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_status_change_on_missing_task(client, dev_headers):
    response = client.patch("/api/tasks/999/status", json={"status": "in_progress"}, headers=dev_headers)
    assert response.status_code == 404


def test_assign_task(client, task, dev_headers, other_developer):
    response = client.post(f"/api/tasks/{task['id']}/assign", json={"assignee_id": other_developer.id},
                           headers=dev_headers)
    assert response.status_code == 200
    assert response.json()["data"]["assignee_id"] == other_developer.id

    response = client.post(f"/api/tasks/{task['id']}/assign", json={"assignee_id": 999}, headers=dev_headers)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "USER_NOT_FOUND"


def test_comment_endpoints(client, task, developer, other_developer, admin):
    author = auth_headers(developer)
    stranger = auth_headers(other_developer)

    response = client.post(f"/api/tasks/{task['id']}/comments", json={"content": "First!"}, headers=author)
    assert response.status_code == 201
    comment = response.json()["data"]
    assert comment["user_name"] == developer.name

    url = f"/api/comments/{comment['id']}"
    response = client.patch(url, json={"content": "Hijacked"}, headers=stranger)
    assert response.status_code == 403
    assert response.json()["error"]["message"] == "Unauthorized to edit this comment"

    response = client.patch(url, json={"content": "Edited"}, headers=author)
    assert response.json()["data"]["is_edited"] is True

    assert client.delete(url, headers=stranger).status_code == 403
    assert client.delete(url, headers=auth_headers(admin)).status_code == 200
    assert client.delete(url, headers=author).status_code == 404
    assert client.get(f"/api/tasks/{task['id']}/comments", headers=author).json()["data"] == []

    response = client.post("/api/tasks/999/comments", json={"content": "?"}, headers=author)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "TASK_NOT_FOUND"


def test_membership_endpoints(client, sprint, lead_headers, dev_headers, developer):
    team_id = sprint.project.team_id
    url = f"/api/teams/{team_id}/members"

    assert client.post(url, json={"user_id": developer.id}, headers=dev_headers).status_code == 403

    response = client.post(url, json={"user_id": developer.id}, headers=lead_headers)
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "developer"

    response = client.post(url, json={"user_id": developer.id}, headers=lead_headers)
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "CONFLICT"
    assert error["details"]["reason"] == "ALREADY_MEMBER"

    members = client.get(url, headers=dev_headers).json()["data"]
    assert [m["user_id"] for m in members] == [developer.id]

    assert client.delete(f"{url}/{developer.id}", headers=lead_headers).status_code == 200
    assert client.delete(f"{url}/{developer.id}", headers=lead_headers).status_code == 404
    assert client.get("/api/teams/999/members", headers=dev_headers).status_code == 404


def test_add_member_missing_team_or_user(client, sprint, lead_headers, developer):
    response = client.post("/api/teams/999/members", json={"user_id": developer.id}, headers=lead_headers)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "TEAM_NOT_FOUND"

    team_id = sprint.project.team_id
    response = client.post(f"/api/teams/{team_id}/members", json={"user_id": 999}, headers=lead_headers)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "USER_NOT_FOUND"


def test_hierarchy_endpoints(client, admin_headers, lead_headers):
    org = client.post("/api/organizations", json={"name": "Acme"}, headers=admin_headers).json()["data"]
    team = client.post("/api/teams", json={"organization_id": org["id"], "name": "Core"},
                       headers=lead_headers).json()["data"]

    response = client.post("/api/projects", json={
        "team_id": team["id"],
        "name": "API",
        "github_repo_url": "https://gitlab.com/acme/api",
    }, headers=lead_headers)
    assert response.status_code == 400

    response = client.post("/api/sprints", json={
        "project_id": 999,
        "name": "S1",
        "start_date": "2024-01-01",
        "end_date": "2024-01-14",
    }, headers=lead_headers)
    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["details"]["reason"] == "PROJECT_NOT_FOUND"

    listing = client.get("/api/organizations", headers=lead_headers).json()
    assert listing["pagination"]["total"] == 1

    assert client.delete(f"/api/organizations/{org['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/teams/{team['id']}", headers=lead_headers).status_code == 404
    assert client.delete(f"/api/organizations/{org['id']}", headers=admin_headers).status_code == 404


def test_unexpected_error_is_redacted(developer, monkeypatch):
    def explode(self, task_id):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(TaskService, "get_task", explode)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/tasks/1", headers=auth_headers(developer))

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"message": "Internal server error", "code": "INTERNAL_ERROR"},
    }
