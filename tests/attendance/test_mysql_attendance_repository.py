from __future__ import annotations

import re
from datetime import date
from pathlib import Path

import mysql.connector
import pytest

from src.institute_system.institute_system.attendance.model import AttendanceMark, SessionKey
from src.institute_system.institute_system.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.institute_system.institute_system.core.enums import AttendanceStatus
from src.institute_system.institute_system.core.exceptions import PersistenceError

REPO_ROOT = Path(__file__).resolve().parents[2]

KEY = SessionKey(teacher_id=2, class_id=1, subject_id=1, attendance_date=date(2025, 3, 10))
MARKS = [
    AttendanceMark(student_id=10, status=AttendanceStatus.ABSENT),
    AttendanceMark(student_id=11, status=AttendanceStatus.PRESENT, remarks="late bus"),
]


class RecordingCursor:
    def __init__(self, fail_on_insert=False):
        self.fail_on_insert = fail_on_insert
        self.statements = []

    def execute(self, sql, params=None):
        self.statements.append((" ".join(sql.split()), tuple(params or ())))

    def executemany(self, sql, seq_params):
        if self.fail_on_insert:
            raise mysql.connector.Error("Deadlock found when trying to get lock")
        self.statements.append((" ".join(sql.split()), list(seq_params)))

    def fetchall(self):
        return []

    def close(self):
        pass


class RecordingConnection:
    def __init__(self, cursor):
        self.cur = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self.cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class RecordingFactory:
    def __init__(self, fail_on_insert=False):
        self.fail_on_insert = fail_on_insert
        self.connections = []

    def connect(self):
        conn = RecordingConnection(RecordingCursor(self.fail_on_insert))
        self.connections.append(conn)
        return conn


def _where_columns(sql: str) -> list[str]:
    where = sql.split(" WHERE ", 1)[1]
    return re.findall(r"(\w+)\s*=\s*%s", where)


def _unique_key_columns() -> list[str]:
    schema = (REPO_ROOT / "database" / "schema.sql").read_text(encoding="utf-8")
    cols = re.search(r"UNIQUE KEY uq_attendance_student_session \(([^)]*)\)", schema).group(1)
    return [c.strip() for c in cols.split(",")]


def test_replace_runs_delete_and_upsert_in_one_transaction():
    factory = RecordingFactory()

    written = MySQLAttendanceRepository(factory).replace_session(KEY, MARKS)

    assert written == 2
    [conn] = factory.connections
    assert conn.committed and not conn.rolled_back
    (delete_sql, delete_params), (insert_sql, insert_rows) = conn.cur.statements
    assert delete_sql.startswith("DELETE FROM attendance_records")
    assert "NOT IN (%s,%s)" in delete_sql
    assert delete_params == (1, 1, date(2025, 3, 10), 10, 11)
    assert "ON DUPLICATE KEY UPDATE" in insert_sql
    assert insert_rows == [
        (2, 10, 1, 1, date(2025, 3, 10), "absent", None),
        (2, 11, 1, 1, date(2025, 3, 10), "present", "late bus"),
    ]


def test_failed_upsert_rolls_back_the_delete():
    factory = RecordingFactory(fail_on_insert=True)

    with pytest.raises(PersistenceError):
        MySQLAttendanceRepository(factory).replace_session(KEY, MARKS)

    [conn] = factory.connections
    assert conn.rolled_back and not conn.committed
    assert conn.cur.statements[0][0].startswith("DELETE FROM attendance_records")


def test_existing_check_and_delete_use_the_unique_key_columns():
    factory = RecordingFactory()
    repo = MySQLAttendanceRepository(factory)

    repo.list_for_session(KEY)
    repo.replace_session(KEY, MARKS)

    select_sql, select_params = factory.connections[0].cur.statements[0]
    delete_sql, _ = factory.connections[1].cur.statements[0]
    unique = set(_unique_key_columns())

    assert "teacher_id" not in unique
    assert set(_where_columns(select_sql)) | {"student_id"} == unique
    assert set(_where_columns(delete_sql)) | {"student_id"} == unique
    assert select_params == (1, 1, date(2025, 3, 10))
