from __future__ import annotations

from typing import Sequence

from ..core.constants import UNKNOWN_NAME, UNKNOWN_ROLL_NO
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import RosterStudent
from .repository import RosterRepository


class MySQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_subject(self, subject_id: int) -> Sequence[RosterStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT st.student_id, st.full_name, st.enrollment_number
                FROM subjects s
                JOIN student_course_enrollments e ON e.course_id = s.course_id AND e.status=%s
                JOIN students st ON st.student_id = e.student_id
                WHERE s.subject_id=%s
                ORDER BY st.enrollment_number ASC, st.student_id ASC
                """,
                (RequestStatus.APPROVED.value, int(subject_id)),
            )
            return [
                RosterStudent(
                    student_id=int(r["student_id"]),
                    full_name=r.get("full_name") or UNKNOWN_NAME,
                    roll_no=r.get("enrollment_number") or UNKNOWN_ROLL_NO,
                )
                for r in fetchall(cur)
            ]
