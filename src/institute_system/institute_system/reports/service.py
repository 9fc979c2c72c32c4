from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.validators import require_positive_id
from ..core.exceptions import NotFoundError
from .calculator.base import AttendanceRateCalculator
from .calculator.standard_calculator import StandardRateCalculator

EXPORT_HEADERS = ["Date", "Class", "Subject", "Subject Code", "Roll Number", "Student Name", "Status"]


@dataclass(frozen=True)
class StudentSummary:
    subjects: list[dict]
    overall: dict

    def to_dict(self) -> dict:
        return {"subjects": self.subjects, "overall": self.overall}


class AttendanceReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[AttendanceRateCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardRateCalculator()

    def build_student_summary(self, *, student_id: int) -> StudentSummary:
        rows = self._attendance.list_for_student(require_positive_id(student_id, "Student"))

        by_subject: dict[int, dict] = {}
        for r in rows:
            s = by_subject.setdefault(
                r.subject_id,
                {
                    "subject_id": r.subject_id,
                    "subject_name": r.subject_name,
                    "subject_code": r.subject_code,
                    "total_classes": 0,
                    "present_count": 0,
                    "absent_count": 0,
                },
            )
            s["total_classes"] += 1
            if self._calculator.counts_as_present(r.status):
                s["present_count"] += 1
            else:
                s["absent_count"] += 1

        subjects: list[dict] = []
        total = present = 0
        for s in by_subject.values():
            pct = self._calculator.percentage(s["present_count"], s["total_classes"])
            subjects.append({**s, "percentage": pct, "band": self._calculator.band(pct)})
            total += s["total_classes"]
            present += s["present_count"]

        overall_pct = self._calculator.percentage(present, total)
        return StudentSummary(
            subjects=subjects,
            overall={
                "total": total,
                "present": present,
                "percentage": overall_pct,
                "band": self._calculator.band(overall_pct),
            },
        )

    def export_teacher_csv(
        self,
        *,
        teacher_id: int,
        class_id: Optional[int] = None,
        subject_id: Optional[int] = None,
    ) -> str:
        """CSV text of a teacher's attendance records, newest first."""

        rows = self._attendance.list_export_rows(
            teacher_id=require_positive_id(teacher_id, "Teacher"),
            class_id=require_positive_id(class_id, "Class") if class_id else None,
            subject_id=require_positive_id(subject_id, "Subject") if subject_id else None,
        )
        if not rows:
            raise NotFoundError("No attendance records match your criteria")

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_HEADERS)
        writer.writeheader()
        for r in rows:
            writer.writerow(
                {
                    "Date": r.attendance_date.strftime("%Y-%m-%d"),
                    "Class": r.class_name,
                    "Subject": r.subject_name,
                    "Subject Code": r.subject_code,
                    "Roll Number": r.roll_no,
                    "Student Name": r.student_name,
                    "Status": r.status.value.capitalize(),
                }
            )
        return out.getvalue()
