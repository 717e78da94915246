from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from werkzeug.security import generate_password_hash

from college_portal.attendance.model import AttendanceSession
from college_portal.container import wire_services
from college_portal.core.enums import Role
from college_portal.main import create_app
from college_portal.users.model import User

from conftest import InMemoryUsers

PASSWORD = "Secret@123"


def account(user_id, username, role, **extra):
    return User(
        user_id=user_id,
        username=username,
        full_name=f"{username} Name",
        password_hash=generate_password_hash(PASSWORD),
        role=role,
        **extra,
    )


@pytest.fixture
def client(monkeypatch, repos):
    monkeypatch.setenv("APP_ENV", "testing")
    repos["users_repo"] = InMemoryUsers(
        [
            account(1, "ADMIN001", Role.ADMIN),
            account(2, "FAC001", Role.FACULTY, department="EEE"),
            account(3, "23HP1A0201", Role.STUDENT, branch="EEE", year=2, section="A"),
        ]
    )
    app = create_app(wire_services(**repos))
    return app.test_client()


def login(client, username):
    return client.post("/login", json={"username": username, "password": PASSWORD})


def test_login_and_me(client):
    assert login(client, "ADMIN001").status_code == 200
    me = client.get("/api/me").get_json()
    assert me["kind"] == "admin"
    assert me["employee_id"] == "ADMIN001"

    client.post("/logout")
    assert client.get("/api/me").status_code == 401


def test_bad_login(client):
    resp = client.post("/login", json={"username": "ADMIN001", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_role_guard(client):
    login(client, "23HP1A0201")
    assert client.get("/api/admin/analytics").status_code == 403
    assert client.post("/api/faculty/attendance", json={}).status_code == 403


def test_classify_endpoint(client):
    login(client, "FAC001")
    body = client.get("/api/identifiers/23HP1A0202").get_json()
    assert body["branch"] == "EEE"
    assert body["valid"] is True


def test_submit_flow_with_unmarked_students(client):
    login(client, "FAC001")
    payload = {"date": "2025-03-10", "branch": "EEE", "year": 2, "section": "A", "marks": {"23HP1A0201": "Present"}}

    resp = client.post("/api/faculty/attendance", json=payload)
    assert resp.status_code == 409
    assert resp.get_json()["unmarked"] == ["23HP1A0202", "23HP1A0203"]

    payload["default_for_unmarked"] = "Absent"
    resp = client.post("/api/faculty/attendance", json=payload)
    assert resp.status_code == 201
    session_id = resp.get_json()["session"]["session_id"]

    recent = client.get("/api/faculty/attendance/recent").get_json()
    assert recent[0]["session"]["session_id"] == session_id
    assert recent[0]["editable"] is True

    assert client.get(f"/api/faculty/attendance/{session_id}").status_code == 200


def test_locked_session_returns_403(client, repos):
    repos["attendance_repo"].save(
        AttendanceSession(
            session_id="2025-01-01_EEE_2_A",
            date="2025-01-01",
            branch="EEE",
            year=2,
            section="A",
            faculty_id="FAC001",
            created_at=datetime.now() - timedelta(hours=3),
            records={"23HP1A0201": "Present"},
        )
    )
    login(client, "FAC001")

    resp = client.put("/api/faculty/attendance/2025-01-01_EEE_2_A", json={"marks": {}, "default_for_unmarked": "Present"})

    assert resp.status_code == 403
    assert "older than 2 hours" in resp.get_json()["message"]


def test_admin_analytics_and_exports(client, repos):
    repos["attendance_repo"].save(
        AttendanceSession(
            session_id="2025-01-01_EEE_2_A",
            date="2025-01-01",
            branch="EEE",
            year=2,
            section="A",
            faculty_id="FAC001",
            records={"23HP1A0201": "Present", "23HP1A0202": "Absent"},
        )
    )
    login(client, "ADMIN001")

    body = client.get("/api/admin/analytics?branches=EEE&start=2025-01-01&end=2025-01-31").get_json()
    assert body["total_sessions"] == 1
    assert body["overall_percent"] == 50
    assert [b["branch"] for b in body["branches"]] == ["EEE"]

    csv_resp = client.get("/api/admin/analytics/export.csv?branches=EEE")
    assert csv_resp.mimetype == "text/csv"
    assert "Attendance_Report_EEE_All_Years" in csv_resp.headers["Content-Disposition"]
    assert b"23HP1A0201" in csv_resp.data

    xlsx_resp = client.get("/api/admin/analytics/export.xlsx")
    assert xlsx_resp.status_code == 200
    assert xlsx_resp.data[:2] == b"PK"

    assert client.get("/api/admin/analytics?start=2025-02-01&end=2025-01-01").status_code == 400


def test_student_dashboard(client, repos):
    repos["attendance_repo"].save(
        AttendanceSession(
            session_id="2025-01-01_EEE_2_A",
            date="2025-01-01",
            branch="EEE",
            year=2,
            section="A",
            faculty_id="FAC001",
            records={"23HP1A0201": "Present"},
        )
    )
    login(client, "23HP1A0201")

    body = client.get("/api/student/dashboard").get_json()

    assert body["attendance"] == {"present": 1, "classes": 1, "percent": 100}
    assert body["marks_average"] == 0


def test_import_and_announcements(client):
    login(client, "ADMIN001")

    resp = client.post("/api/admin/students/import", json={"students": {"24HP1A0501": "Divya", "24HP1A9901": "Farah"}})
    body = resp.get_json()
    assert body["imported"] == 2
    assert list(body["warnings"]) == ["24HP1A9901"]

    assert client.post("/api/announcements", json={"title": "Holiday", "content": "Friday"}).status_code == 201
    items = client.get("/api/announcements").get_json()
    assert [a["title"] for a in items] == ["Holiday"]


def test_classify_endpoint_reports_non_ascii_digits(client):
    login(client, "FAC001")
    resp = client.get("/api/identifiers/%C2%B23HP1A0202")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["valid"] is False
    assert body["warning"]


def _failing_list_sessions(**kwargs):
    raise RuntimeError("database unavailable")


@pytest.mark.parametrize(
    "url, user",
    [
        ("/api/admin/analytics/export.csv", "ADMIN001"),
        ("/api/admin/analytics/export.xlsx", "ADMIN001"),
        ("/api/faculty/reports/subjects?branch=EEE&year=2&section=A", "FAC001"),
    ],
)
def test_report_endpoints_return_json_500_on_unexpected_errors(client, repos, monkeypatch, url, user):
    monkeypatch.setattr(repos["attendance_repo"], "list_sessions", _failing_list_sessions)
    login(client, user)

    resp = client.get(url)

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False


def test_faculty_signup_needs_admin_approval(client):
    resp = client.post(
        "/register/faculty",
        json={"employee_id": "FAC002", "name": "Ravi", "password": "Secret@1", "department": "CSE"},
    )
    assert resp.status_code == 201
    user_id = resp.get_json()["user_id"]

    denied = client.post("/login", json={"username": "FAC002", "password": "Secret@1"})
    assert denied.status_code == 401
    assert "approval" in denied.get_json()["message"]

    login(client, "ADMIN001")
    pending = client.get("/api/admin/users?pending=1").get_json()
    assert [u["username"] for u in pending] == ["FAC002"]
    assert "password_hash" not in pending[0]
    assert client.post(f"/api/admin/users/{user_id}/approve").status_code == 200
    assert client.post("/api/admin/users/999/approve").status_code == 404
    client.post("/logout")

    assert client.post("/login", json={"username": "FAC002", "password": "Secret@1"}).status_code == 200


def test_student_signup_rejects_duplicate_number(client):
    assert client.post("/register/student", json={"registration_number": "23HP1A0204", "name": "Deepa"}).status_code == 201

    resp = client.post("/register/student", json={"registration_number": "23HP1A0201", "name": "Asha"})
    assert resp.status_code == 400
    assert "already exists" in resp.get_json()["message"]


def test_admin_password_reset(client):
    login(client, "ADMIN001")
    assert client.put("/api/admin/users/3/password", json={"password": "abc"}).status_code == 400
    assert client.put("/api/admin/users/3/password", json={"password": "Fresh@123"}).status_code == 200
    client.post("/logout")

    assert login(client, "23HP1A0201").status_code == 401
    assert client.post("/login", json={"username": "23HP1A0201", "password": "Fresh@123"}).status_code == 200


def test_imported_students_can_log_in(client):
    login(client, "ADMIN001")
    body = client.post("/api/admin/students/import", json={"students": {"24HP1A0501": "Divya"}}).get_json()
    assert body["accounts_created"] == 1
    client.post("/logout")

    assert client.post("/login", json={"username": "24HP1A0501", "password": "24HP1A0501"}).status_code == 200
