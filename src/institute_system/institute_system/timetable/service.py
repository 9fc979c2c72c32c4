from __future__ import annotations

from datetime import time
from typing import Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import TimeLike, format_hhmm, parse_hhmm
from ..common.validators import require_positive_id
from ..core.constants import DAY_END, DAY_START
from ..core.enums import DayOfWeek, Role
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from .model import NewScheduledSession, ScheduledSession, TeachingAssignment
from .repository import TimetableRepository

logger = get_logger("timetable")


def intervals_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open [start, end) overlap: touching endpoints do not clash."""
    return start_a < end_b and end_a > start_b


class TimetableService:
    def __init__(self, sessions: TimetableRepository):
        self._sessions = sessions

    @staticmethod
    def _validate_slot(day_of_week: int, start: TimeLike, end: TimeLike) -> tuple[int, time, time]:
        try:
            day = DayOfWeek(int(day_of_week))
        except (TypeError, ValueError):
            raise ValidationError("Day of week must be between 1 and 7")

        start_t = parse_hhmm(start)
        end_t = parse_hhmm(end)
        if end_t <= start_t:
            raise ValidationError("End time must be after start time")
        return day.value, start_t, end_t

    def find_conflicts(
        self,
        *,
        class_id: int,
        day_of_week: int,
        start: TimeLike,
        end: TimeLike,
    ) -> list[ScheduledSession]:
        day, start_t, end_t = self._validate_slot(day_of_week, start, end)
        class_id = require_positive_id(class_id, "Class")
        existing = self._sessions.list_for_class_day(class_id=class_id, day_of_week=day)
        return [s for s in existing if intervals_overlap(start_t, end_t, s.start_time, s.end_time)]

    def has_conflict(self, *, class_id: int, day_of_week: int, start: TimeLike, end: TimeLike) -> bool:
        return bool(self.find_conflicts(class_id=class_id, day_of_week=day_of_week, start=start, end=end))

    def ensure_no_conflict(self, *, class_id: int, day_of_week: int, start: TimeLike, end: TimeLike) -> None:
        conflicts = self.find_conflicts(class_id=class_id, day_of_week=day_of_week, start=start, end=end)
        if conflicts:
            labels = ", ".join(s.label for s in conflicts)
            raise ConflictError(f"There is already a class scheduled at this time: {labels}", conflicts)

    def create_session(self, *, current_role: Role, entry: NewScheduledSession) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can edit the timetable")

        class_id = require_positive_id(entry.class_id, "Class")
        subject_id = require_positive_id(entry.subject_id, "Subject")
        teacher_id = require_positive_id(entry.teacher_id, "Teacher")
        day, start_t, end_t = self._validate_slot(entry.day_of_week, entry.start_time, entry.end_time)

        if start_t < DAY_START or end_t > DAY_END:
            raise ValidationError(
                f"Sessions must fall between {format_hhmm(DAY_START)} and {format_hhmm(DAY_END)}"
            )

        try:
            self.ensure_no_conflict(class_id=class_id, day_of_week=day, start=start_t, end=end_t)
        except ConflictError:
            logger.warning(
                "timetable clash rejected class=%s day=%s %s-%s",
                class_id, day, format_hhmm(start_t), format_hhmm(end_t),
            )
            raise

        session_id = self._sessions.create(
            class_id=class_id,
            subject_id=subject_id,
            teacher_id=teacher_id,
            day_of_week=day,
            start_time=start_t,
            end_time=end_t,
        )
        logger.info(
            "timetable session %s created class=%s day=%s %s-%s",
            session_id, class_id, day, format_hhmm(start_t), format_hhmm(end_t),
        )
        return session_id

    def list_for_class(self, *, class_id: int) -> Sequence[dict]:
        return self._sessions.list_for_class(class_id=require_positive_id(class_id, "Class"))

    def list_for_teacher(self, *, teacher_id: int) -> Sequence[dict]:
        return self._sessions.list_for_teacher(teacher_id=require_positive_id(teacher_id, "Teacher"))

    def list_teaching_assignments(self, *, teacher_id: int) -> Sequence[TeachingAssignment]:
        return self._sessions.list_teaching_assignments(teacher_id=require_positive_id(teacher_id, "Teacher"))
