from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import AttendanceStatus


class AttendanceRateCalculator(ABC):
    """Calculator interface (Strategy Pattern for attendance percentages)."""

    @abstractmethod
    def counts_as_present(self, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    @abstractmethod
    def percentage(self, present: int, total: int) -> float:
        raise NotImplementedError

    @abstractmethod
    def band(self, percentage: float) -> str:
        raise NotImplementedError
