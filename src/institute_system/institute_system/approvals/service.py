from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..common.app_logger import get_logger
from ..common.datetime_utils import today_local
from ..common.validators import optional_text, require_non_empty, require_positive_id
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..notifications.model import NewNotification
from .model import ENROLLMENT_DECISIONS, PAYMENT_DECISIONS, PaymentTransaction
from .repository import ApprovalRepository

logger = get_logger("approvals")

ENTITY_PAYMENT = "payment_transaction"
ENTITY_ENROLLMENT = "course_enrollment"


def generate_receipt_number(on: date) -> str:
    return f"RCPT-{on.strftime('%Y%m%d')}-{uuid.uuid4().hex[:8].upper()}"


class ApprovalService:
    def __init__(self, approvals: ApprovalRepository):
        self._approvals = approvals

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can process requests")

    @staticmethod
    def _require_student(current_role: Role) -> None:
        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can submit this request")

    @staticmethod
    def _ensure_pending(status: RequestStatus) -> None:
        if status.is_terminal:
            raise InvalidTransitionError(f"Request has already been {status.value}")

    # -------- Fee payments --------
    def record_fee_payment(
        self,
        *,
        current_role: Role,
        student_id: int,
        fee_structure_id: Optional[int],
        amount: object,
        payment_method: str,
        transaction_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> tuple[int, str]:
        self._require_student(current_role)
        student_id = require_positive_id(student_id, "Student")
        if fee_structure_id is not None:
            fee_structure_id = require_positive_id(fee_structure_id, "Fee structure")

        try:
            value = Decimal(str(amount))
        except (InvalidOperation, ValueError):
            raise ValidationError("Amount is invalid")
        if not value.is_finite() or value <= 0:
            raise ValidationError("Amount must be greater than zero")

        method = require_non_empty(payment_method, "Payment method")
        payment_date = today or today_local()
        receipt = generate_receipt_number(payment_date)

        payment_id = self._approvals.create_payment(
            student_id=student_id,
            fee_structure_id=fee_structure_id,
            amount=value,
            payment_method=method,
            payment_date=payment_date,
            receipt_number=receipt,
            transaction_id=optional_text(transaction_id),
            notification=NewNotification(
                recipient_role=Role.ADMIN,
                recipient_id=None,
                title="New fee payment",
                message=f"Payment {receipt} of {value} is awaiting approval",
                related_entity=ENTITY_PAYMENT,
            ),
        )
        logger.info("fee payment %s recorded student=%s receipt=%s", payment_id, student_id, receipt)
        return payment_id, receipt

    def _get_pending_payment(self, payment_id: int) -> PaymentTransaction:
        payment = self._approvals.get_payment(payment_id=require_positive_id(payment_id, "Payment"))
        if not payment:
            raise NotFoundError("Payment not found")
        self._ensure_pending(payment.status)
        return payment

    def _decide_payment(
        self,
        *,
        payment: PaymentTransaction,
        status: RequestStatus,
        admin_user_id: int,
        remarks: Optional[str],
    ) -> None:
        if status not in PAYMENT_DECISIONS:
            raise ValidationError("Status must be completed or rejected")

        if status == RequestStatus.COMPLETED:
            title = "Payment approved"
            message = f"Your payment {payment.receipt_number} has been approved"
        else:
            title = "Payment rejected"
            message = f"Your payment {payment.receipt_number} was rejected: {remarks}"

        decided = self._approvals.decide_payment(
            payment_id=payment.payment_id,
            status=status,
            decided_by=int(admin_user_id),
            admin_remarks=remarks,
            notification=NewNotification(
                recipient_role=Role.STUDENT,
                recipient_id=payment.student_id,
                title=title,
                message=message,
                related_entity=ENTITY_PAYMENT,
                entity_id=payment.payment_id,
            ),
        )
        if not decided:
            logger.warning("payment %s was decided concurrently", payment.payment_id)
            raise InvalidTransitionError("Request has already been processed")
        logger.info("payment %s -> %s by user=%s", payment.payment_id, status.value, admin_user_id)

    def approve_payment(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        payment_id: int,
        remarks: Optional[str] = None,
    ) -> None:
        self._require_admin(current_role)
        payment = self._get_pending_payment(payment_id)
        self._decide_payment(
            payment=payment,
            status=RequestStatus.COMPLETED,
            admin_user_id=admin_user_id,
            remarks=optional_text(remarks),
        )

    def reject_payment(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        payment_id: int,
        remarks: Optional[str],
    ) -> None:
        self._require_admin(current_role)
        reason = require_non_empty(remarks, "Rejection reason")
        payment = self._get_pending_payment(payment_id)
        self._decide_payment(
            payment=payment,
            status=RequestStatus.REJECTED,
            admin_user_id=admin_user_id,
            remarks=reason,
        )

    # -------- Course enrollments --------
    def request_course_enrollment(
        self,
        *,
        current_role: Role,
        student_id: int,
        course_id: int,
        academic_year: Optional[str] = None,
        semester: Optional[int] = None,
    ) -> int:
        self._require_student(current_role)
        student_id = require_positive_id(student_id, "Student")
        course_id = require_positive_id(course_id, "Course")
        if semester is not None:
            semester = require_positive_id(semester, "Semester")

        active = self._approvals.find_active_enrollment(student_id=student_id, course_id=course_id)
        if active:
            raise ConflictError(f"You already have a {active.status.value} enrollment for this course", [])

        enrollment_id = self._approvals.create_enrollment(
            student_id=student_id,
            course_id=course_id,
            academic_year=optional_text(academic_year),
            semester=semester,
            notification=NewNotification(
                recipient_role=Role.ADMIN,
                recipient_id=None,
                title="New enrollment request",
                message=f"Student {student_id} requested enrollment in course {course_id}",
                related_entity=ENTITY_ENROLLMENT,
            ),
        )
        logger.info("enrollment %s requested student=%s course=%s", enrollment_id, student_id, course_id)
        return enrollment_id

    def process_enrollment_request(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        enrollment_id: int,
        status: object,
        remarks: Optional[str] = None,
    ) -> None:
        self._require_admin(current_role)

        try:
            decision = RequestStatus(status)
        except ValueError:
            decision = None
        if decision not in ENROLLMENT_DECISIONS:
            raise ValidationError("Status must be approved or rejected")

        remarks = optional_text(remarks)
        if decision == RequestStatus.REJECTED and not remarks:
            raise ValidationError("Rejection reason is required")

        enrollment = self._approvals.get_enrollment(
            enrollment_id=require_positive_id(enrollment_id, "Enrollment")
        )
        if not enrollment:
            raise NotFoundError("Enrollment request not found")
        self._ensure_pending(enrollment.status)

        course = enrollment.course_name or f"course {enrollment.course_id}"
        if decision == RequestStatus.APPROVED:
            title = "Enrollment approved"
            message = f"Your enrollment in {course} has been approved"
        else:
            title = "Enrollment rejected"
            message = f"Your enrollment in {course} was rejected: {remarks}"

        decided = self._approvals.decide_enrollment(
            enrollment_id=enrollment.enrollment_id,
            status=decision,
            decided_by=int(admin_user_id),
            admin_remarks=remarks,
            notification=NewNotification(
                recipient_role=Role.STUDENT,
                recipient_id=enrollment.student_id,
                title=title,
                message=message,
                related_entity=ENTITY_ENROLLMENT,
                entity_id=enrollment.enrollment_id,
            ),
        )
        if not decided:
            logger.warning("enrollment %s was decided concurrently", enrollment.enrollment_id)
            raise InvalidTransitionError("Request has already been processed")
        logger.info("enrollment %s -> %s by user=%s", enrollment.enrollment_id, decision.value, admin_user_id)

    # -------- Listings --------
    def list_pending(self, *, current_role: Role, limit: int = DEFAULT_LIST_LIMIT) -> dict:
        self._require_admin(current_role)
        return {
            "payments": list(self._approvals.list_payments(status=RequestStatus.PENDING, limit=limit)),
            "enrollments": list(self._approvals.list_enrollments(status=RequestStatus.PENDING, limit=limit)),
        }

    def list_for_student(self, *, student_id: int, limit: int = DEFAULT_LIST_LIMIT) -> dict:
        student_id = require_positive_id(student_id, "Student")
        return {
            "payments": list(self._approvals.list_payments(student_id=student_id, limit=limit)),
            "enrollments": list(self._approvals.list_enrollments(student_id=student_id, limit=limit)),
        }

