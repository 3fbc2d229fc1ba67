from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.hrms_workflow.hrms_workflow.audit.service import AuditService
from src.hrms_workflow.hrms_workflow.main import create_app

CASUAL_LEAVE = {
    "leave_type": "Casual",
    "from_date": "2026-03-16",
    "to_date": "2026-03-17",
    "reason": "Family function",
}


@pytest.fixture
def client(monkeypatch, request_service, identity, notification_service, audit_repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = SimpleNamespace(
        request_service=request_service,
        identity_service=identity,
        notification_service=notification_service,
        audit_service=AuditService(audit_repo),
    )
    app = create_app(container=container)
    return app.test_client()


def login(client, employee_id):
    res = client.post("/api/session", json={"employee_id": employee_id})
    assert res.status_code == 200
    return res


def test_requires_session(client):
    res = client.get("/api/leave")

    assert res.status_code == 401
    assert res.get_json()["error"] == "AuthenticationError"


def test_unknown_employee_cannot_sign_in(client):
    res = client.post("/api/session", json={"employee_id": "GHOST"})
    assert res.status_code == 401


def test_submit_and_list(client):
    login(client, "EMP001")

    res = client.post("/api/leave", json=CASUAL_LEAVE)
    assert res.status_code == 201
    body = res.get_json()
    assert body["stage_status"] == {"hod": "Pending", "ceo": "Pending", "admin": "Pending"}
    assert body["active_stage"] == "hod"
    assert body["outcome"] == "IN_PROGRESS"

    listing = client.get("/api/leave?page=1&limit=5").get_json()
    assert listing["total"] == 1
    assert listing["total_pages"] == 1
    assert listing["items"][0]["request_id"] == body["request_id"]


def test_validation_error_is_400(client):
    login(client, "EMP001")

    res = client.post("/api/ot", json={"date": "2026-03-07", "hours": 40})

    assert res.status_code == 400
    assert res.get_json()["error"] == "ValidationError"


def test_decision_flow_and_error_codes(client):
    login(client, "EMP001")
    rid = client.post("/api/leave", json=CASUAL_LEAVE).get_json()["request_id"]

    login(client, "CEO001")
    res = client.put(f"/api/leave/{rid}/decision", json={"decision": "approve"})
    assert res.status_code == 403
    assert res.get_json()["error"] == "NotAuthorized"

    login(client, "HOD001")
    detail = client.get(f"/api/leave/{rid}").get_json()
    assert detail["actions"] == ["approve", "reject"]

    res = client.put(f"/api/leave/{rid}/decision", json={"decision": "reject"})
    assert res.status_code == 400
    assert res.get_json()["error"] == "MissingRemarks"

    res = client.put(f"/api/leave/{rid}/decision", json={"decision": "reject", "remarks": "Release week"})
    assert res.status_code == 200
    assert res.get_json()["outcome"] == "REJECTED"

    login(client, "CEO001")
    res = client.put(f"/api/leave/{rid}/decision", json={"decision": "approve"})
    assert res.status_code == 409
    assert res.get_json()["error"] == "AlreadyTerminal"


def test_wrong_type_or_missing_request_is_404(client):
    login(client, "EMP001")
    rid = client.post("/api/leave", json=CASUAL_LEAVE).get_json()["request_id"]

    assert client.get(f"/api/od/{rid}").status_code == 404
    assert client.get("/api/leave/999").status_code == 404


def test_unknown_decision_is_400(client):
    login(client, "EMP001")
    rid = client.post("/api/leave", json=CASUAL_LEAVE).get_json()["request_id"]

    login(client, "HOD001")
    res = client.put(f"/api/leave/{rid}/decision", json={"decision": "escalate"})

    assert res.status_code == 400
    assert res.get_json()["error"] == "InvalidDecision"


def test_notifications_endpoints(client):
    login(client, "EMP001")
    client.post("/api/leave", json=CASUAL_LEAVE)

    login(client, "HOD001")
    items = client.get("/api/notifications").get_json()["items"]
    assert items[0]["message"] == "Leave request from Priya Raman awaits your approval"

    nid = items[0]["notification_id"]
    assert client.post(f"/api/notifications/{nid}/read").status_code == 200
    assert client.get("/api/notifications?unread=1").get_json()["items"] == []

    login(client, "EMP002")
    assert client.post(f"/api/notifications/{nid}/read").status_code == 404


def test_detail_carries_audit_trail(client):
    login(client, "EMP001")
    rid = client.post("/api/leave", json=CASUAL_LEAVE).get_json()["request_id"]

    login(client, "HOD001")
    client.put(f"/api/leave/{rid}/decision", json={"decision": "approve"})
    detail = client.get(f"/api/leave/{rid}").get_json()

    assert [(a["actor_id"], a["action"]) for a in detail["audit"]] == [
        ("EMP001", "Submitted Leave Request"),
        ("HOD001", "Approved Leave Request"),
    ]


def test_non_numeric_department_filter_is_400(client):
    login(client, "CEO001")

    res = client.get("/api/leave?department_id=abc")

    assert res.status_code == 400
    assert res.get_json()["error"] == "ValidationError"
