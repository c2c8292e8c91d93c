import pytest
from fastapi.testclient import TestClient

from app.api.v1.endpoints.reminders import get_mailer
from app.core.config import settings
from app.core.security import create_jwt_token
from app.main import app

from conftest import FakeMailer


def auth(email, role="user"):
    token = create_jwt_token({"sub": email, "role": role})
    return {"Authorization": f"Bearer {token}"}


OWNER = auth("owner@softechinc.ai")
STRANGER = auth("stranger@softechinc.ai")
MANAGER = auth("manager@softechinc.ai", role="manager")


@pytest.fixture
def mailer():
    return FakeMailer(failing={"bounce@softechinc.ai"})


@pytest.fixture
def client(tmp_path, monkeypatch, mailer):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    monkeypatch.setattr(settings, "REMINDER_SCHEDULER_ENABLED", False)
    app.dependency_overrides[get_mailer] = lambda: mailer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_project(client, headers=OWNER, name="Website revamp"):
    response = client.post(
        "/api/v1/projects",
        json={"name": name, "major_goal": "Ship it", "description": "New marketing site"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def test_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


def test_requests_without_a_session_are_rejected(client):
    assert client.get("/api/v1/projects").status_code == 401
    bad = client.get("/api/v1/projects", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_unknown_role_is_rejected(client):
    assert client.get("/api/v1/projects", headers=auth("x@softechinc.ai", role="admin")).status_code == 401


def test_project_lifecycle(client):
    project = create_project(client)
    project_id = project["project_id"]
    assert project["created_by"] == "owner@softechinc.ai"
    assert project["status"] == "active"

    for title in ("Design", "Build", "Launch"):
        response = client.post(
            "/api/v1/milestones",
            json={"project_id": project_id, "title": title, "is_current": True},
            headers=OWNER,
        )
        assert response.status_code == 201

    listing = client.get("/api/v1/projects", headers=OWNER).json()
    assert len(listing) == 1
    assert sorted(m["title"] for m in listing[0]["current_milestones"]) == ["Build", "Launch"]

    detail = client.get(f"/api/v1/projects/{project_id}", headers=OWNER).json()
    assert [m["is_current"] for m in detail["milestones"]] == [True, True, False]
    assert detail["stats"] == {"total": 3, "completed": 0, "percent_complete": 0}

    updated = client.put(
        f"/api/v1/projects/{project_id}",
        json={"name": "Website v2", "major_goal": "Ship it", "status": "on-hold"},
        headers=OWNER,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "on-hold"

    assert client.delete(f"/api/v1/projects/{project_id}", headers=OWNER).status_code == 200
    assert client.get(f"/api/v1/projects/{project_id}", headers=OWNER).status_code == 404


def test_domain_errors_are_mapped(client):
    project = create_project(client)

    missing = client.get("/api/v1/projects/nope", headers=OWNER)
    assert missing.status_code == 404
    assert missing.json() == {"detail": "Project not found", "kind": "not_found"}

    denied = client.get(f"/api/v1/projects/{project['project_id']}", headers=STRANGER)
    assert denied.status_code == 403
    assert denied.json()["kind"] == "access_denied"

    invalid = client.post("/api/v1/projects", json={"name": "No goal"}, headers=OWNER)
    assert invalid.status_code == 400
    assert invalid.json()["detail"] == "Name and major goal are required"

    assert client.get(f"/api/v1/projects/{project['project_id']}", headers=MANAGER).status_code == 200


def test_weekly_progress_endpoints(client):
    project = create_project(client)
    milestone = client.post(
        "/api/v1/milestones",
        json={"project_id": project["project_id"], "title": "Build"},
        headers=OWNER,
    ).json()

    week = client.get("/api/v1/weekly-progress/current-week", headers=OWNER).json()
    created = client.post(
        "/api/v1/weekly-progress",
        json={
            "milestone_id": milestone["milestone_id"],
            "week_start_date": week["week_start_date"],
            "week_end_date": week["week_end_date"],
            "completed_this_week": ["Login page"],
            "task_delays": [{"task": "Payments", "is_completed": False, "delay_reasons": ["client"]}],
        },
        headers=OWNER,
    )
    assert created.status_code == 201
    progress = created.json()
    assert progress["completed_this_week"] == ["Login page"]

    patched = client.patch(
        f"/api/v1/weekly-progress/{progress['progress_id']}",
        json={"goals_achieved": True},
        headers=OWNER,
    )
    assert patched.json()["goals_achieved"] is True
    assert patched.json()["task_delays"][0]["delay_reasons"] == ["client"]

    history = client.get(f"/api/v1/weekly-progress/milestone/{milestone['milestone_id']}", headers=OWNER)
    assert [p["progress_id"] for p in history.json()] == [progress["progress_id"]]


def test_reminder_send_and_sweep(client, mailer):
    project = create_project(client)

    def schedule(recipient):
        response = client.post(
            "/api/v1/reminders",
            json={
                "project_id": project["project_id"],
                "subject": "Weekly update",
                "message": "Please report",
                "recipient_email": recipient,
                "reminder_date": "2024-01-01T09:00:00",
            },
            headers=OWNER,
        )
        assert response.status_code == 201
        return response.json()

    manual = schedule("lead@softechinc.ai")
    sent = client.post("/api/v1/reminders/send", json={"reminder_id": manual["reminder_id"]}, headers=OWNER)
    assert sent.status_code == 200
    again = client.post("/api/v1/reminders/send", json={"reminder_id": manual["reminder_id"]}, headers=OWNER)
    assert again.status_code == 400
    assert again.json()["kind"] == "already_sent"

    bounce = schedule("bounce@softechinc.ai")
    failed = client.post("/api/v1/reminders/send", json={"reminder_id": bounce["reminder_id"]}, headers=OWNER)
    assert failed.status_code == 502

    schedule("team@softechinc.ai")
    sweep = client.get("/api/v1/reminders/send")
    assert sweep.status_code == 200
    assert sweep.json()["message"] == "Processed 2 reminders"
    assert sorted(r["status"] for r in sweep.json()["results"]) == ["error", "sent"]

    listing = client.get("/api/v1/reminders", headers=OWNER).json()
    statuses = {r["recipient_email"]: r["status"] for r in listing}
    assert statuses == {
        "lead@softechinc.ai": "sent",
        "bounce@softechinc.ai": "scheduled",
        "team@softechinc.ai": "sent",
    }
    assert [m["to"] for m in mailer.sent] == ["lead@softechinc.ai", "team@softechinc.ai"]
    assert client.get("/api/v1/reminders", headers=STRANGER).json() == []
