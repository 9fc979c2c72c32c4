from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import UNKNOWN_NAME, UNKNOWN_ROLL_NO
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_placeholders
from .model import AttendanceExportRow, AttendanceMark, AttendanceRecord, SessionKey, StudentAttendanceRow
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_session(self, key: SessionKey) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, teacher_id, student_id, class_id, subject_id, attendance_date, status, remarks
                FROM attendance_records
                WHERE class_id=%s AND subject_id=%s AND attendance_date=%s
                """,
                key.sheet_params,
            )
            return [
                AttendanceRecord(
                    record_id=int(r["record_id"]),
                    teacher_id=int(r["teacher_id"]),
                    student_id=int(r["student_id"]),
                    class_id=int(r["class_id"]),
                    subject_id=int(r["subject_id"]),
                    attendance_date=r["attendance_date"],
                    status=AttendanceStatus(r["status"]),
                    remarks=r.get("remarks"),
                )
                for r in fetchall(cur)
            ]

    def replace_session(self, key: SessionKey, marks: Sequence[AttendanceMark]) -> int:
        student_ids = [int(m.student_id) for m in marks]

        # Both statements share one transaction: db_cursor rolls back on failure.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                DELETE FROM attendance_records
                WHERE class_id=%s AND subject_id=%s AND attendance_date=%s
                  AND student_id NOT IN ({in_placeholders(student_ids)})
                """,
                key.sheet_params + tuple(student_ids),
            )
            cur.executemany(
                """
                INSERT INTO attendance_records(
                    teacher_id, student_id, class_id, subject_id, attendance_date, status, remarks
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    teacher_id=VALUES(teacher_id), status=VALUES(status), remarks=VALUES(remarks)
                """,
                [
                    (
                        key.teacher_id,
                        int(m.student_id),
                        key.class_id,
                        key.subject_id,
                        key.attendance_date,
                        m.status.value,
                        m.remarks,
                    )
                    for m in marks
                ],
            )
            return len(marks)

    def list_for_student(self, student_id: int) -> Sequence[StudentAttendanceRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.attendance_date, ar.status, ar.remarks,
                       s.subject_id, s.name AS subject_name, s.code AS subject_code
                FROM attendance_records ar
                JOIN subjects s ON s.subject_id = ar.subject_id
                WHERE ar.student_id=%s
                ORDER BY ar.attendance_date DESC
                """,
                (int(student_id),),
            )
            return [
                StudentAttendanceRow(
                    attendance_date=r["attendance_date"],
                    subject_id=int(r["subject_id"]),
                    subject_name=r["subject_name"],
                    subject_code=r["subject_code"],
                    status=AttendanceStatus(r["status"]),
                    remarks=r.get("remarks"),
                )
                for r in fetchall(cur)
            ]

    def list_export_rows(
        self,
        *,
        teacher_id: int,
        class_id: Optional[int] = None,
        subject_id: Optional[int] = None,
    ) -> Sequence[AttendanceExportRow]:
        clauses = ["ar.teacher_id=%s"]
        params: list[object] = [int(teacher_id)]

        if class_id is not None:
            clauses.append("ar.class_id=%s")
            params.append(int(class_id))
        if subject_id is not None:
            clauses.append("ar.subject_id=%s")
            params.append(int(subject_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    ar.attendance_date, ar.status,
                    c.name AS class_name,
                    s.name AS subject_name, s.code AS subject_code,
                    st.full_name, st.enrollment_number
                FROM attendance_records ar
                LEFT JOIN classes c ON c.class_id = ar.class_id
                LEFT JOIN subjects s ON s.subject_id = ar.subject_id
                LEFT JOIN students st ON st.student_id = ar.student_id
                WHERE {where}
                ORDER BY ar.attendance_date DESC, st.enrollment_number ASC
                """,
                tuple(params),
            )
            return [
                AttendanceExportRow(
                    attendance_date=r["attendance_date"],
                    class_name=r.get("class_name") or UNKNOWN_NAME,
                    subject_name=r.get("subject_name") or UNKNOWN_NAME,
                    subject_code=r.get("subject_code") or UNKNOWN_ROLL_NO,
                    roll_no=r.get("enrollment_number") or UNKNOWN_ROLL_NO,
                    student_name=r.get("full_name") or UNKNOWN_NAME,
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
