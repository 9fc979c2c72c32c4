from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.constants import UNKNOWN_NAME, UNKNOWN_ROLL_NO
from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..notifications.model import NewNotification
from ..notifications.mysql_notification_repository import insert_notification
from .model import EnrollmentRequest, PaymentTransaction
from .repository import ApprovalRepository


def _filters(status: Optional[RequestStatus], student_id: Optional[int]) -> tuple[str, list[object]]:
    clauses = ["1=1"]
    params: list[object] = []

    if status is not None:
        clauses.append("r.status=%s")
        params.append(status.value)
    if student_id is not None:
        clauses.append("r.student_id=%s")
        params.append(int(student_id))

    return " AND ".join(clauses), params


def _fmt_dt(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else ""


class MySQLApprovalRepository(ApprovalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Fee payments --------
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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payment_transactions(
                    student_id, fee_structure_id, amount, payment_method,
                    payment_date, receipt_number, transaction_id, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    fee_structure_id,
                    amount,
                    payment_method,
                    payment_date,
                    receipt_number,
                    transaction_id,
                    RequestStatus.PENDING.value,
                ),
            )
            payment_id = int(cur.lastrowid)
            insert_notification(cur, replace(notification, entity_id=payment_id))
            return payment_id

    def get_payment(self, *, payment_id: int) -> Optional[PaymentTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT payment_id, student_id, fee_structure_id, amount, payment_method,
                       payment_date, receipt_number, transaction_id, status,
                       created_at, decided_by, decided_at, admin_remarks
                FROM payment_transactions
                WHERE payment_id=%s
                """,
                (int(payment_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PaymentTransaction(
                payment_id=int(r["payment_id"]),
                student_id=int(r["student_id"]),
                fee_structure_id=r.get("fee_structure_id"),
                amount=Decimal(str(r["amount"])),
                payment_method=r["payment_method"],
                payment_date=r["payment_date"],
                receipt_number=r["receipt_number"],
                transaction_id=r.get("transaction_id"),
                status=RequestStatus(r["status"]),
                created_at=r.get("created_at"),
                decided_by=r.get("decided_by"),
                decided_at=r.get("decided_at"),
                admin_remarks=r.get("admin_remarks"),
            )

    def list_payments(
        self,
        *,
        status: Optional[RequestStatus] = None,
        student_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        where, params = _filters(status, student_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.payment_id, r.student_id, st.full_name, st.enrollment_number,
                       r.fee_structure_id, r.amount, r.payment_method, r.payment_date,
                       r.receipt_number, r.transaction_id, r.status, r.created_at, r.admin_remarks
                FROM payment_transactions r
                LEFT JOIN students st ON st.student_id = r.student_id
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                out.append(
                    {
                        "payment_id": int(r["payment_id"]),
                        "student_id": int(r["student_id"]),
                        "student_name": r.get("full_name") or UNKNOWN_NAME,
                        "enrollment_number": r.get("enrollment_number") or UNKNOWN_ROLL_NO,
                        "fee_structure_id": r.get("fee_structure_id"),
                        "amount": str(r["amount"]),
                        "payment_method": r["payment_method"],
                        "payment_date": r["payment_date"].strftime("%Y-%m-%d"),
                        "receipt_number": r["receipt_number"],
                        "transaction_id": r.get("transaction_id") or "",
                        "status": r["status"],
                        "created_at": _fmt_dt(r.get("created_at")),
                        "admin_remarks": r.get("admin_remarks") or "",
                    }
                )
            return out

    def decide_payment(
        self,
        *,
        payment_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_remarks: Optional[str],
        notification: NewNotification,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payment_transactions
                SET status=%s, decided_by=%s, decided_at=NOW(), admin_remarks=%s
                WHERE payment_id=%s AND status=%s
                """,
                (status.value, int(decided_by), admin_remarks, int(payment_id), RequestStatus.PENDING.value),
            )
            if cur.rowcount <= 0:
                return False
            insert_notification(cur, notification)
            return True

    # -------- Course enrollments --------
    def create_enrollment(
        self,
        *,
        student_id: int,
        course_id: int,
        academic_year: Optional[str],
        semester: Optional[int],
        notification: NewNotification,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_course_enrollments(student_id, course_id, academic_year, semester, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(student_id), int(course_id), academic_year, semester, RequestStatus.PENDING.value),
            )
            enrollment_id = int(cur.lastrowid)
            insert_notification(cur, replace(notification, entity_id=enrollment_id))
            return enrollment_id

    def _get_enrollment_where(self, where: str, params: tuple) -> Optional[EnrollmentRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.enrollment_id, r.student_id, r.course_id, r.academic_year, r.semester,
                       r.status, r.created_at, r.decided_by, r.decided_at, r.admin_remarks,
                       c.name AS course_name
                FROM student_course_enrollments r
                LEFT JOIN courses c ON c.course_id = r.course_id
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT 1
                """,
                params,
            )
            r = fetchone(cur)
            if not r:
                return None
            return EnrollmentRequest(
                enrollment_id=int(r["enrollment_id"]),
                student_id=int(r["student_id"]),
                course_id=int(r["course_id"]),
                academic_year=r.get("academic_year"),
                semester=r.get("semester"),
                status=RequestStatus(r["status"]),
                created_at=r.get("created_at"),
                decided_by=r.get("decided_by"),
                decided_at=r.get("decided_at"),
                admin_remarks=r.get("admin_remarks"),
                course_name=r.get("course_name"),
            )

    def get_enrollment(self, *, enrollment_id: int) -> Optional[EnrollmentRequest]:
        return self._get_enrollment_where("r.enrollment_id=%s", (int(enrollment_id),))

    def find_active_enrollment(self, *, student_id: int, course_id: int) -> Optional[EnrollmentRequest]:
        return self._get_enrollment_where(
            "r.student_id=%s AND r.course_id=%s AND r.status IN (%s,%s)",
            (int(student_id), int(course_id), RequestStatus.PENDING.value, RequestStatus.APPROVED.value),
        )

    def list_enrollments(
        self,
        *,
        status: Optional[RequestStatus] = None,
        student_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        where, params = _filters(status, student_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.enrollment_id, r.student_id, st.full_name, st.email,
                       r.course_id, c.name AS course_name, c.code AS course_code,
                       r.academic_year, r.semester, r.status, r.created_at, r.admin_remarks
                FROM student_course_enrollments r
                LEFT JOIN students st ON st.student_id = r.student_id
                LEFT JOIN courses c ON c.course_id = r.course_id
                WHERE {where}
                ORDER BY r.created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                out.append(
                    {
                        "enrollment_id": int(r["enrollment_id"]),
                        "student_id": int(r["student_id"]),
                        "student_name": r.get("full_name") or UNKNOWN_NAME,
                        "student_email": r.get("email") or UNKNOWN_NAME,
                        "course_id": int(r["course_id"]),
                        "course_name": r.get("course_name") or UNKNOWN_NAME,
                        "course_code": r.get("course_code") or UNKNOWN_NAME,
                        "academic_year": r.get("academic_year") or UNKNOWN_ROLL_NO,
                        "semester": r.get("semester") if r.get("semester") is not None else UNKNOWN_ROLL_NO,
                        "status": r["status"],
                        "created_at": _fmt_dt(r.get("created_at")),
                        "admin_remarks": r.get("admin_remarks") or "",
                    }
                )
            return out

    def decide_enrollment(
        self,
        *,
        enrollment_id: int,
        status: RequestStatus,
        decided_by: int,
        admin_remarks: Optional[str],
        notification: NewNotification,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE student_course_enrollments
                SET status=%s, decided_by=%s, decided_at=NOW(), admin_remarks=%s
                WHERE enrollment_id=%s AND status=%s
                """,
                (status.value, int(decided_by), admin_remarks, int(enrollment_id), RequestStatus.PENDING.value),
            )
            if cur.rowcount <= 0:
                return False
            insert_notification(cur, notification)
            return True
