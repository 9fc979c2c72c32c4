from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import RequestStatus

PAYMENT_DECISIONS = frozenset({RequestStatus.COMPLETED, RequestStatus.REJECTED})
ENROLLMENT_DECISIONS = frozenset({RequestStatus.APPROVED, RequestStatus.REJECTED})


@dataclass(frozen=True)
class PaymentTransaction:
    payment_id: int
    student_id: int
    fee_structure_id: Optional[int]
    amount: Decimal
    payment_method: str
    payment_date: date
    receipt_number: str
    transaction_id: Optional[str]
    status: RequestStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_remarks: Optional[str] = None


@dataclass(frozen=True)
class EnrollmentRequest:
    enrollment_id: int
    student_id: int
    course_id: int
    academic_year: Optional[str]
    semester: Optional[int]
    status: RequestStatus
    created_at: Optional[datetime] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    admin_remarks: Optional[str] = None
    course_name: Optional[str] = None
