from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceExportRow, AttendanceMark, AttendanceRecord, RosterStudent, SessionKey, StudentAttendanceRow


class AttendanceRepository(Protocol):
    def list_for_session(self, key: SessionKey) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def replace_session(self, key: SessionKey, marks: Sequence[AttendanceMark]) -> int:
        """Replace every record of the session with ``marks`` in one transaction.

        Returns the number of rows written.
        """

        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[StudentAttendanceRow]:
        raise NotImplementedError

    def list_export_rows(
        self,
        *,
        teacher_id: int,
        class_id: Optional[int] = None,
        subject_id: Optional[int] = None,
    ) -> Sequence[AttendanceExportRow]:
        raise NotImplementedError


class RosterRepository(Protocol):
    def list_for_subject(self, subject_id: int) -> Sequence[RosterStudent]:
        """Students with an approved enrollment in the course owning the subject."""

        raise NotImplementedError
