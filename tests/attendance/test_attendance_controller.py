from __future__ import annotations

from datetime import date, timedelta
from types import SimpleNamespace

from src.institute_system.institute_system.attendance.controller import register
from src.institute_system.institute_system.attendance.model import AttendanceRecord, RosterStudent
from src.institute_system.institute_system.attendance.service import AttendanceService
from src.institute_system.institute_system.core.enums import AttendanceStatus, Role


class InMemoryAttendanceRepo:
    def __init__(self):
        self.rows = {}

    def list_for_session(self, key):
        return list(self.rows.get(key.sheet_params, []))

    def replace_session(self, key, marks):
        self.rows[key.sheet_params] = [
            AttendanceRecord(
                record_id=i + 1,
                teacher_id=key.teacher_id,
                student_id=m.student_id,
                class_id=key.class_id,
                subject_id=key.subject_id,
                attendance_date=key.attendance_date,
                status=m.status,
            )
            for i, m in enumerate(marks)
        ]
        return len(marks)


class FakeRosterRepo:
    def list_for_subject(self, subject_id):
        return [
            RosterStudent(student_id=1, full_name="An Nguyen", roll_no="R001"),
            RosterStudent(student_id=2, full_name="Binh Tran", roll_no="R002"),
        ]


def _client(make_client):
    container = SimpleNamespace(attendance_service=AttendanceService(InMemoryAttendanceRepo(), FakeRosterRepo()))
    return make_client(container, [register], role=Role.TEACHER, entity_id=7)


def _body(day: str, **extra):
    return {
        "class_id": 1,
        "subject_id": 2,
        "date": day,
        "records": [{"student_id": 1, "present": False}, {"student_id": 2, "present": True}],
        **extra,
    }


def test_students_cannot_open_marking_screen(make_client):
    container = SimpleNamespace(attendance_service=None)
    client = make_client(container, [register], role=Role.STUDENT, entity_id=5)
    assert client.get("/api/attendance/session?class_id=1&subject_id=2&date=2025-03-10").status_code == 403


def test_fresh_session_defaults_to_present(make_client):
    client = _client(make_client)

    data = client.get("/api/attendance/session?class_id=1&subject_id=2&date=2025-03-10").get_json()

    assert [s["present"] for s in data["students"]] == [True, True]


def test_commit_returns_fresh_roster_and_second_commit_needs_confirmation(make_client):
    client = _client(make_client)
    day = "2025-03-10"

    first = client.post("/api/attendance/session", json=_body(day))
    assert first.status_code == 200
    assert [s["present"] for s in first.get_json()["students"]] == [False, True]

    second = client.post("/api/attendance/session", json=_body(day))
    assert second.status_code == 409
    assert second.get_json()["requires_confirmation"] is True

    third = client.post("/api/attendance/session", json=_body(day, overwrite=True))
    assert third.status_code == 200
    assert third.get_json()["saved"] == 2


def test_future_date_is_400(make_client):
    client = _client(make_client)
    future = (date.today() + timedelta(days=1)).isoformat()

    resp = client.post("/api/attendance/session", json=_body(future))

    assert resp.status_code == 400
    assert "future" in resp.get_json()["message"]


def test_bad_date_is_400(make_client):
    client = _client(make_client)
    assert client.get("/api/attendance/session?class_id=1&subject_id=2&date=10/03/2025").status_code == 400


def test_explicit_status_is_accepted(make_client):
    client = _client(make_client)
    body = _body("2025-03-10")
    body["records"] = [{"student_id": 1, "status": AttendanceStatus.LATE.value}]

    data = client.post("/api/attendance/session", json=body).get_json()

    assert data["students"][0]["status"] == "late"
    assert data["students"][0]["present"] is False
