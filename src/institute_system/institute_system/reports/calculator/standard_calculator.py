from __future__ import annotations

from .base import AttendanceRateCalculator
from ...core.constants import ATTENDANCE_GOOD_PERCENT, ATTENDANCE_WARNING_PERCENT
from ...core.enums import AttendanceStatus


class StandardRateCalculator(AttendanceRateCalculator):
    """Standard rule: only ``present`` counts; late is treated as not present."""

    def counts_as_present(self, status: AttendanceStatus) -> bool:
        return status == AttendanceStatus.PRESENT

    def percentage(self, present: int, total: int) -> float:
        if total <= 0:
            return 0.0
        return round(present * 100.0 / total, 1)

    def band(self, percentage: float) -> str:
        if percentage >= ATTENDANCE_GOOD_PERCENT:
            return "good"
        if percentage >= ATTENDANCE_WARNING_PERCENT:
            return "warning"
        return "critical"
