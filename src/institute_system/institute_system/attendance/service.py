from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import today_local
from ..common.validators import optional_text, require_positive_id
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConfirmationRequiredError, ValidationError
from .model import AttendanceMark, RosterAttendance, SessionKey
from .repository import AttendanceRepository, RosterRepository

logger = get_logger("attendance")


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, roster: RosterRepository):
        self._attendance = attendance
        self._roster = roster

    @staticmethod
    def _session_key(*, teacher_id: int, class_id: int, subject_id: int, attendance_date: date) -> SessionKey:
        if not isinstance(attendance_date, date):
            raise ValidationError("Please select a date")
        return SessionKey(
            teacher_id=require_positive_id(teacher_id, "Teacher"),
            class_id=require_positive_id(class_id, "Class"),
            subject_id=require_positive_id(subject_id, "Subject"),
            attendance_date=attendance_date,
        )

    @staticmethod
    def _normalize_marks(marks: Sequence[AttendanceMark]) -> list[AttendanceMark]:
        if not marks:
            raise ValidationError("No students to record attendance for")

        seen: set[int] = set()
        out: list[AttendanceMark] = []
        for m in marks:
            student_id = require_positive_id(m.student_id, "Student")
            if student_id in seen:
                raise ValidationError(f"Student {student_id} is listed more than once")
            seen.add(student_id)

            try:
                status = AttendanceStatus(m.status)
            except ValueError:
                raise ValidationError(f"Invalid attendance status: {m.status!r}")

            out.append(AttendanceMark(student_id=student_id, status=status, remarks=optional_text(m.remarks)))
        return out

    def resolve_session(
        self,
        *,
        teacher_id: int,
        class_id: int,
        subject_id: int,
        attendance_date: date,
    ) -> list[RosterAttendance]:
        """Roster for the marking screen.

        Students without a saved record default to present, which is the
        convenience used when a session is marked for the first time.
        """

        key = self._session_key(
            teacher_id=teacher_id,
            class_id=class_id,
            subject_id=subject_id,
            attendance_date=attendance_date,
        )
        roster = self._roster.list_for_subject(key.subject_id)
        saved = {r.student_id: r.status for r in self._attendance.list_for_session(key)}

        out: list[RosterAttendance] = []
        for student in roster:
            status = saved.get(student.student_id, AttendanceStatus.PRESENT)
            out.append(
                RosterAttendance(
                    student_id=student.student_id,
                    name=student.full_name,
                    roll_no=student.roll_no,
                    present=status == AttendanceStatus.PRESENT,
                    status=status,
                )
            )
        return out

    def commit_session(
        self,
        *,
        teacher_id: int,
        class_id: int,
        subject_id: int,
        attendance_date: date,
        marks: Sequence[AttendanceMark],
        overwrite: bool = False,
        today: Optional[date] = None,
    ) -> int:
        today = today or today_local()
        if isinstance(attendance_date, date) and attendance_date > today:
            raise ValidationError("Cannot mark attendance for future dates")

        key = self._session_key(
            teacher_id=teacher_id,
            class_id=class_id,
            subject_id=subject_id,
            attendance_date=attendance_date,
        )
        clean = self._normalize_marks(marks)

        existing = self._attendance.list_for_session(key)
        if existing and not overwrite:
            logger.warning(
                "attendance overwrite not confirmed teacher=%s class=%s subject=%s date=%s",
                key.teacher_id, key.class_id, key.subject_id, key.attendance_date,
            )
            raise ConfirmationRequiredError(
                "Attendance records already exist for this date. Confirm to overwrite them."
            )

        written = self._attendance.replace_session(key, clean)
        logger.info(
            "attendance saved teacher=%s class=%s subject=%s date=%s rows=%s overwrite=%s",
            key.teacher_id, key.class_id, key.subject_id, key.attendance_date, written, bool(existing),
        )
        return written
