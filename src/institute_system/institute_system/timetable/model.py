from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import TimeLike, format_hhmm
from ..core.enums import DayOfWeek


@dataclass(frozen=True)
class ScheduledSession:
    """Domain entity: a recurring weekly class-time block."""

    session_id: int
    class_id: int
    subject_id: int
    teacher_id: int
    day_of_week: int
    start_time: time
    end_time: time

    @property
    def label(self) -> str:
        return f"{format_hhmm(self.start_time)}-{format_hhmm(self.end_time)}"

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "class_id": self.class_id,
            "subject_id": self.subject_id,
            "teacher_id": self.teacher_id,
            "day_of_week": self.day_of_week,
            "day": DayOfWeek(self.day_of_week).label,
            "start_time": format_hhmm(self.start_time),
            "end_time": format_hhmm(self.end_time),
        }


@dataclass(frozen=True)
class NewScheduledSession:
    """Input for the timetable entry form."""

    class_id: int
    subject_id: int
    teacher_id: int
    day_of_week: int
    start_time: TimeLike
    end_time: TimeLike


@dataclass(frozen=True)
class TeachingAssignment:
    """A (class, subject) pair a teacher is timetabled for."""

    class_id: int
    class_name: str
    room: Optional[str]
    subject_id: int
    subject_name: str
    subject_code: str
