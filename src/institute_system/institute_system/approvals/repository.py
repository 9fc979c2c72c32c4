from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from ..notifications.model import NewNotification
from .model import EnrollmentRequest, PaymentTransaction


class ApprovalRepository(Protocol):
    """Persistence for approval workflows.

    Every write that changes a request also inserts the notification it
    carries, inside the same transaction.
    """

    # Fee payments
    def create_payment(
        self,
        *,
        student_id: int,
        fee_structure_id: Optional[int],
        amount: Decimal,
        payment_method: str,
        payment_date: date,
        receipt_number: str,
        transaction_id: Optional[str],
        notification: NewNotification,
    ) -> int:
        raise NotImplementedError

    def get_payment(self, *, payment_id: int) -> Optional[PaymentTransaction]:
        raise NotImplementedError

    def list_payments(
        self,
        *,
        status: Optional[RequestStatus] = None,
        student_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return UI rows (joined with student)."""

        raise NotImplementedError

    def decide_payment(
        self,
        *,
        payment_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_remarks: Optional[str],
        notification: NewNotification,
    ) -> bool:
        """Move a pending payment to ``status``.

        Returns False (and writes nothing) when the payment is no longer pending.
        """

        raise NotImplementedError

    # Course enrollments
    def create_enrollment(
        self,
        *,
        student_id: int,
        course_id: int,
        academic_year: Optional[str],
        semester: Optional[int],
        notification: NewNotification,
    ) -> int:
        raise NotImplementedError

    def get_enrollment(self, *, enrollment_id: int) -> Optional[EnrollmentRequest]:
        raise NotImplementedError

    def find_active_enrollment(self, *, student_id: int, course_id: int) -> Optional[EnrollmentRequest]:
        """Pending or approved enrollment of the student in the course, if any."""

        raise NotImplementedError

    def list_enrollments(
        self,
        *,
        status: Optional[RequestStatus] = None,
        student_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        raise NotImplementedError

    def decide_enrollment(
        self,
        *,
        enrollment_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_remarks: Optional[str],
        notification: NewNotification,
    ) -> bool:
        raise NotImplementedError
