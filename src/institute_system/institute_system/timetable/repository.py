from __future__ import annotations

from datetime import time
from typing import Protocol, Sequence

from .model import ScheduledSession, TeachingAssignment


class TimetableRepository(Protocol):
    def list_for_class_day(self, *, class_id: int, day_of_week: int) -> Sequence[ScheduledSession]:
        raise NotImplementedError

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
        """Insert one timetable entry.

        Returns session_id.
        """

        raise NotImplementedError

    def list_for_class(self, *, class_id: int) -> Sequence[dict]:
        """List sessions for the timetable grid (joined with subject/teacher)."""

        raise NotImplementedError

    def list_for_teacher(self, *, teacher_id: int) -> Sequence[dict]:
        raise NotImplementedError

    def list_teaching_assignments(self, *, teacher_id: int) -> Sequence[TeachingAssignment]:
        raise NotImplementedError
