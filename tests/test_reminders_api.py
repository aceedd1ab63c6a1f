from datetime import timedelta

from conftest import TODAY


def test_health(client):
    body = client.get("/api/health").json()
    assert body["status"] == "OK"


def test_manual_run_and_log(client, auth_headers, make_task, transport, test_user):
    task = make_task(TODAY + timedelta(days=2))

    result = client.post("/api/reminders/run", headers=auth_headers).json()
    assert result == {"status": "completed", "reason": None, "checked": 1, "sent": 1, "failed": 0}

    again = client.post("/api/reminders/run", headers=auth_headers).json()
    assert again["sent"] == 0

    log = client.get("/api/reminders/log", headers=auth_headers).json()["notifications"]
    assert len(log) == 1
    assert log[0]["task_id"] == task.id
    assert log[0]["email"] == test_user.email
    assert log[0]["status"] == "sent"
    assert log[0]["notification_type"] == "due_reminder"
    assert len(transport.sent) == 1


def test_force_and_test_routes(client, auth_headers, make_task, test_user, transport):
    make_task(TODAY + timedelta(days=2))

    body = client.post(f"/api/reminders/force/{test_user.id}", headers=auth_headers).json()
    assert body["success"] is True and body["email"] == test_user.email

    body = client.post("/api/reminders/test", headers=auth_headers).json()
    assert body["success"] is True
    assert len(transport.sent) == 2


def test_force_for_user_without_tasks(client, auth_headers):
    body = client.post("/api/reminders/force/999", headers=auth_headers).json()
    assert body == {"success": False, "message": "No pending tasks found for this user", "task": None, "email": None}


def test_status_when_stopped(client, auth_headers):
    body = client.get("/api/reminders/status", headers=auth_headers).json()
    assert body == {"status": "stopped", "pass_running": False, "jobs": []}


def test_reminder_routes_require_token(client):
    assert client.post("/api/reminders/run").status_code == 401
