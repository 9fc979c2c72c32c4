from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class SessionKey:
    """An attendance sheet and the teacher recording it.

    The sheet is identified by (class, subject, date), the same columns the
    per-student unique key uses; teacher_id is only the author of the write.
    """

    teacher_id: int
    class_id: int
    subject_id: int
    attendance_date: date

    @property
    def sheet_params(self) -> tuple:
        return (self.class_id, self.subject_id, self.attendance_date)


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for an attendance session."""

    record_id: int
    teacher_id: int
    student_id: int
    class_id: int
    subject_id: int
    attendance_date: date
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AttendanceMark:
    """Input row submitted by the teacher for one student."""

    student_id: int
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class RosterStudent:
    student_id: int
    full_name: str
    roll_no: str


@dataclass(frozen=True)
class RosterAttendance:
    """Read-model for the marking screen: roster merged with saved records."""

    student_id: int
    name: str
    roll_no: str
    present: bool
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "name": self.name,
            "roll_no": self.roll_no,
            "present": self.present,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class StudentAttendanceRow:
    """Read-model for a student's own history (joined with subject)."""

    attendance_date: date
    subject_id: int
    subject_name: str
    subject_code: str
    status: AttendanceStatus
    remarks: Optional[str] = None


@dataclass(frozen=True)
class AttendanceExportRow:
    """Read-model for the teacher CSV export (joined with class/subject/student)."""

    attendance_date: date
    class_name: str
    subject_name: str
    subject_code: str
    roll_no: str
    student_name: str
    status: AttendanceStatus
