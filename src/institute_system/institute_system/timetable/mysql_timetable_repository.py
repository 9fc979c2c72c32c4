from __future__ import annotations

from datetime import time
from typing import Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import ScheduledSession, TeachingAssignment
from .repository import TimetableRepository


def _row_to_session(r: dict) -> ScheduledSession:
    return ScheduledSession(
        session_id=int(r["entry_id"]),
        class_id=int(r["class_id"]),
        subject_id=int(r["subject_id"]),
        teacher_id=int(r["teacher_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_class_day(self, *, class_id: int, day_of_week: int) -> Sequence[ScheduledSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entry_id, class_id, subject_id, teacher_id, day_of_week, start_time, end_time
                FROM timetable_entries
                WHERE class_id=%s AND day_of_week=%s
                ORDER BY start_time ASC
                """,
                (int(class_id), int(day_of_week)),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        class_id: int,
        subject_id: int,
        teacher_id: int,
        day_of_week: int,
        start_time: time,
        end_time: time,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_entries(class_id, subject_id, teacher_id, day_of_week, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(class_id), int(subject_id), int(teacher_id), int(day_of_week), start_time, end_time),
            )
            return int(cur.lastrowid)

    def _list_grid(self, *, column: str, value: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    te.entry_id,
                    te.day_of_week,
                    te.start_time,
                    te.end_time,
                    c.class_id,
                    c.name AS class_name,
                    c.room,
                    s.subject_id,
                    s.name AS subject_name,
                    s.code AS subject_code,
                    t.teacher_id,
                    t.full_name AS teacher_name
                FROM timetable_entries te
                JOIN classes c ON c.class_id = te.class_id
                JOIN subjects s ON s.subject_id = te.subject_id
                JOIN teachers t ON t.teacher_id = te.teacher_id
                WHERE te.{column}=%s
                ORDER BY te.day_of_week ASC, te.start_time ASC
                """,
                (int(value),),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                start = normalize_mysql_time(r["start_time"])
                end = normalize_mysql_time(r["end_time"])
                out.append(
                    {
                        "session_id": int(r["entry_id"]),
                        "day_of_week": int(r["day_of_week"]),
                        "day": DayOfWeek(int(r["day_of_week"])).label,
                        "start_time": start.strftime("%H:%M"),
                        "end_time": end.strftime("%H:%M"),
                        "class_id": int(r["class_id"]),
                        "class_name": r["class_name"],
                        "room": r.get("room") or "",
                        "subject_id": int(r["subject_id"]),
                        "subject_name": r["subject_name"],
                        "subject_code": r["subject_code"],
                        "teacher_id": int(r["teacher_id"]),
                        "teacher_name": r["teacher_name"],
                    }
                )
            return out

    def list_for_class(self, *, class_id: int) -> Sequence[dict]:
        return self._list_grid(column="class_id", value=class_id)

    def list_for_teacher(self, *, teacher_id: int) -> Sequence[dict]:
        return self._list_grid(column="teacher_id", value=teacher_id)

    def list_teaching_assignments(self, *, teacher_id: int) -> Sequence[TeachingAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT
                    c.class_id, c.name AS class_name, c.room,
                    s.subject_id, s.name AS subject_name, s.code AS subject_code
                FROM timetable_entries te
                JOIN classes c ON c.class_id = te.class_id
                JOIN subjects s ON s.subject_id = te.subject_id
                WHERE te.teacher_id=%s
                ORDER BY c.name ASC, s.name ASC
                """,
                (int(teacher_id),),
            )
            return [
                TeachingAssignment(
                    class_id=int(r["class_id"]),
                    class_name=r["class_name"],
                    room=r.get("room"),
                    subject_id=int(r["subject_id"]),
                    subject_name=r["subject_name"],
                    subject_code=r["subject_code"],
                )
                for r in fetchall(cur)
            ]
