from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Actor role used for authorization and notification routing."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class DayOfWeek(int, Enum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @property
    def label(self) -> str:
        return self.name.capitalize()


class AttendanceStatus(str, Enum):
    """Per-student status stored for an attendance session."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"


class RequestStatus(str, Enum):
    """Approval workflow status (fee payments, course enrollments)."""

    PENDING = "pending"
    APPROVED = "approved"
    COMPLETED = "completed"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING
