from __future__ import annotations

from dataclasses import dataclass

from .approvals.mysql_approval_repository import MySQLApprovalRepository
from .approvals.service import ApprovalService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.mysql_roster_repository import MySQLRosterRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .reports.service import AttendanceReportService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.service import TimetableService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    timetable_repo: MySQLTimetableRepository
    attendance_repo: MySQLAttendanceRepository
    roster_repo: MySQLRosterRepository
    approvals_repo: MySQLApprovalRepository
    notifications_repo: MySQLNotificationRepository

    timetable_service: TimetableService
    attendance_service: AttendanceService
    approval_service: ApprovalService
    notification_service: NotificationService
    report_service: AttendanceReportService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    timetable_repo = MySQLTimetableRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    roster_repo = MySQLRosterRepository(conn)
    approvals_repo = MySQLApprovalRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    return Container(
        conn=conn,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        roster_repo=roster_repo,
        approvals_repo=approvals_repo,
        notifications_repo=notifications_repo,
        timetable_service=TimetableService(timetable_repo),
        attendance_service=AttendanceService(attendance_repo, roster_repo),
        approval_service=ApprovalService(approvals_repo),
        notification_service=NotificationService(notifications_repo),
        report_service=AttendanceReportService(attendance_repo),
    )
