from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.institute_system.institute_system.attendance.model import (
    AttendanceMark,
    AttendanceRecord,
    RosterStudent,
    SessionKey,
)
from src.institute_system.institute_system.attendance.service import AttendanceService
from src.institute_system.institute_system.core.enums import AttendanceStatus
from src.institute_system.institute_system.core.exceptions import ConfirmationRequiredError, ValidationError


class InMemoryAttendanceRepo:
    """Rows keyed like uq_attendance_student_session: (student, class, subject, date)."""

    def __init__(self):
        self._rows: dict[tuple, AttendanceRecord] = {}
        self._next_id = 1
        self.replace_calls = 0

    def seed(self, key: SessionKey, student_id: int, status: AttendanceStatus):
        self._rows[(student_id,) + key.sheet_params] = AttendanceRecord(
            record_id=self._next_id,
            teacher_id=key.teacher_id,
            student_id=student_id,
            class_id=key.class_id,
            subject_id=key.subject_id,
            attendance_date=key.attendance_date,
            status=status,
        )
        self._next_id += 1

    def list_for_session(self, key):
        return [r for k, r in sorted(self._rows.items()) if k[1:] == key.sheet_params]

    def replace_session(self, key, marks):
        self.replace_calls += 1
        keep = {m.student_id for m in marks}
        for k in [k for k in self._rows if k[1:] == key.sheet_params and k[0] not in keep]:
            del self._rows[k]
        for m in marks:
            self.seed(key, m.student_id, m.status)
        return len(marks)

    def list_for_student(self, student_id):
        return []

    def list_export_rows(self, *, teacher_id, class_id=None, subject_id=None):
        return []


class FakeRosterRepo:
    def __init__(self, students):
        self._students = list(students)

    def list_for_subject(self, subject_id):
        return list(self._students)


ROSTER = [
    RosterStudent(student_id=1, full_name="An Nguyen", roll_no="R001"),
    RosterStudent(student_id=2, full_name="Binh Tran", roll_no="R002"),
    RosterStudent(student_id=3, full_name="Unknown", roll_no="N/A"),
]


def _key(day: date) -> SessionKey:
    return SessionKey(teacher_id=7, class_id=1, subject_id=2, attendance_date=day)


def _svc(repo=None):
    return AttendanceService(repo or InMemoryAttendanceRepo(), FakeRosterRepo(ROSTER))


def _commit(svc, day, marks, **kwargs):
    return svc.commit_session(teacher_id=7, class_id=1, subject_id=2, attendance_date=day, marks=marks, **kwargs)


def test_unmarked_session_defaults_everyone_to_present(fixed_today):
    svc = _svc()

    roster = svc.resolve_session(teacher_id=7, class_id=1, subject_id=2, attendance_date=fixed_today)

    assert [r.student_id for r in roster] == [1, 2, 3]
    assert all(r.present for r in roster)
    assert all(r.status == AttendanceStatus.PRESENT for r in roster)


def test_saved_records_are_merged_into_roster(fixed_today):
    repo = InMemoryAttendanceRepo()
    repo.seed(_key(fixed_today), 2, AttendanceStatus.ABSENT)
    repo.seed(_key(fixed_today), 3, AttendanceStatus.LATE)
    svc = _svc(repo)

    roster = {r.student_id: r for r in svc.resolve_session(teacher_id=7, class_id=1, subject_id=2, attendance_date=fixed_today)}

    assert roster[1].present is True
    assert roster[2].present is False
    assert roster[3].present is False
    assert roster[3].status == AttendanceStatus.LATE


def test_records_saved_by_another_teacher_are_shown(fixed_today):
    repo = InMemoryAttendanceRepo()
    other = SessionKey(teacher_id=8, class_id=1, subject_id=2, attendance_date=fixed_today)
    repo.seed(other, 1, AttendanceStatus.ABSENT)
    svc = _svc(repo)

    roster = svc.resolve_session(teacher_id=7, class_id=1, subject_id=2, attendance_date=fixed_today)

    assert roster[0].present is False
    assert roster[0].status == AttendanceStatus.ABSENT


def test_sheet_marked_by_another_teacher_requires_confirmation(fixed_today):
    repo = InMemoryAttendanceRepo()
    other = SessionKey(teacher_id=8, class_id=1, subject_id=2, attendance_date=fixed_today)
    repo.seed(other, 1, AttendanceStatus.ABSENT)
    svc = _svc(repo)

    with pytest.raises(ConfirmationRequiredError):
        _commit(svc, fixed_today, [AttendanceMark(student_id=1, status=AttendanceStatus.PRESENT)], today=fixed_today)

    assert repo.replace_calls == 0
    [row] = repo.list_for_session(other)
    assert (row.teacher_id, row.status) == (8, AttendanceStatus.ABSENT)

    _commit(
        svc,
        fixed_today,
        [AttendanceMark(student_id=1, status=AttendanceStatus.PRESENT)],
        overwrite=True,
        today=fixed_today,
    )
    [row] = repo.list_for_session(other)
    assert (row.teacher_id, row.status) == (7, AttendanceStatus.PRESENT)


def test_resolve_round_trips_committed_marks(fixed_today):
    svc = _svc()
    marks = [
        AttendanceMark(student_id=1, status=AttendanceStatus.ABSENT),
        AttendanceMark(student_id=2, status=AttendanceStatus.PRESENT),
        AttendanceMark(student_id=3, status=AttendanceStatus.ABSENT),
    ]

    _commit(svc, fixed_today, marks, today=fixed_today)
    roster = svc.resolve_session(teacher_id=7, class_id=1, subject_id=2, attendance_date=fixed_today)

    assert [r.present for r in roster] == [False, True, False]


def test_all_absent_session_resolves_as_all_absent(fixed_today):
    svc = _svc()
    marks = [AttendanceMark(student_id=s.student_id, status=AttendanceStatus.ABSENT) for s in ROSTER]

    _commit(svc, fixed_today, marks, today=fixed_today)
    roster = svc.resolve_session(teacher_id=7, class_id=1, subject_id=2, attendance_date=fixed_today)

    assert [r.present for r in roster] == [False, False, False]
    assert {r.status for r in roster} == {AttendanceStatus.ABSENT}


def test_future_date_is_rejected_before_anything_else(fixed_today):
    repo = InMemoryAttendanceRepo()
    svc = _svc(repo)

    with pytest.raises(ValidationError, match="future"):
        _commit(svc, fixed_today + timedelta(days=1), [], today=fixed_today)
    assert repo.replace_calls == 0


def test_existing_session_requires_confirmation(fixed_today):
    repo = InMemoryAttendanceRepo()
    repo.seed(_key(fixed_today), 1, AttendanceStatus.ABSENT)
    svc = _svc(repo)

    with pytest.raises(ConfirmationRequiredError):
        _commit(svc, fixed_today, [AttendanceMark(student_id=1, status=AttendanceStatus.PRESENT)], today=fixed_today)

    assert repo.replace_calls == 0
    assert repo.list_for_session(_key(fixed_today))[0].status == AttendanceStatus.ABSENT


def test_confirmed_overwrite_replaces_the_whole_session(fixed_today):
    repo = InMemoryAttendanceRepo()
    repo.seed(_key(fixed_today), 1, AttendanceStatus.ABSENT)
    repo.seed(_key(fixed_today), 2, AttendanceStatus.ABSENT)
    svc = _svc(repo)

    written = _commit(
        svc,
        fixed_today,
        [AttendanceMark(student_id=1, status=AttendanceStatus.PRESENT)],
        overwrite=True,
        today=fixed_today,
    )

    assert written == 1
    rows = repo.list_for_session(_key(fixed_today))
    assert [(r.student_id, r.status) for r in rows] == [(1, AttendanceStatus.PRESENT)]


def test_marks_must_be_non_empty_and_unique(fixed_today):
    svc = _svc()

    with pytest.raises(ValidationError):
        _commit(svc, fixed_today, [], today=fixed_today)

    dup = [
        AttendanceMark(student_id=1, status=AttendanceStatus.PRESENT),
        AttendanceMark(student_id=1, status=AttendanceStatus.ABSENT),
    ]
    with pytest.raises(ValidationError):
        _commit(svc, fixed_today, dup, today=fixed_today)


def test_unknown_status_is_rejected(fixed_today):
    svc = _svc()
    with pytest.raises(ValidationError):
        _commit(svc, fixed_today, [AttendanceMark(student_id=1, status="excused")], today=fixed_today)


def test_string_statuses_and_blank_remarks_are_normalized(fixed_today):
    repo = InMemoryAttendanceRepo()
    captured = {}

    def replace_session(key, marks):
        captured["marks"] = list(marks)
        return len(marks)

    repo.replace_session = replace_session
    svc = _svc(repo)

    _commit(svc, fixed_today, [AttendanceMark(student_id="1", status="late", remarks="   ")], today=fixed_today)

    assert captured["marks"] == [AttendanceMark(student_id=1, status=AttendanceStatus.LATE, remarks=None)]
