from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from src.institute_system.institute_system.approvals.controller import register
from src.institute_system.institute_system.approvals.model import EnrollmentRequest, PaymentTransaction
from src.institute_system.institute_system.approvals.service import ApprovalService
from src.institute_system.institute_system.core.enums import RequestStatus, Role


class SeededApprovalRepo:
    def __init__(self):
        self.payment = PaymentTransaction(
            payment_id=1,
            student_id=5,
            fee_structure_id=None,
            amount=Decimal("100"),
            payment_method="cash",
            payment_date=date(2025, 3, 1),
            receipt_number="RCPT-20250301-ABCDEF12",
            transaction_id=None,
            status=RequestStatus.PENDING,
        )
        self.enrollment = EnrollmentRequest(
            enrollment_id=2,
            student_id=5,
            course_id=3,
            academic_year="2024-2025",
            semester=1,
            status=RequestStatus.PENDING,
        )
        self.notifications = []
        self.created_payments = []

    def get_payment(self, *, payment_id):
        return self.payment if payment_id == 1 else None

    def decide_payment(self, *, payment_id, status, decided_by, admin_remarks, notification):
        if self.payment.status != RequestStatus.PENDING:
            return False
        self.payment = replace(self.payment, status=status, admin_remarks=admin_remarks)
        self.notifications.append(notification)
        return True

    def get_enrollment(self, *, enrollment_id):
        return self.enrollment if enrollment_id == 2 else None

    def find_active_enrollment(self, *, student_id, course_id):
        return self.enrollment if course_id == 3 and not self.enrollment.status.is_terminal else None

    def create_enrollment(self, *, student_id, course_id, academic_year, semester, notification):
        self.notifications.append(notification)
        return 10

    def create_payment(self, **kwargs):
        self.created_payments.append(kwargs)
        return 11

    def decide_enrollment(self, *, enrollment_id, status, decided_by, admin_remarks, notification):
        if self.enrollment.status != RequestStatus.PENDING:
            return False
        self.enrollment = replace(self.enrollment, status=status, admin_remarks=admin_remarks)
        self.notifications.append(notification)
        return True

    def list_payments(self, *, status=None, student_id=None, limit=200):
        if status is not None and self.payment.status != status:
            return []
        return [{"payment_id": 1, "status": self.payment.status.value}]

    def list_enrollments(self, *, status=None, student_id=None, limit=200):
        if status is not None and self.enrollment.status != status:
            return []
        return [{"enrollment_id": 2, "status": self.enrollment.status.value}]


def _setup(make_client, role, entity_id=None):
    repo = SeededApprovalRepo()
    client = make_client(
        SimpleNamespace(approval_service=ApprovalService(repo)),
        [register],
        role=role,
        entity_id=entity_id,
    )
    return repo, client


def test_admin_sees_pending_requests(make_client):
    _, client = _setup(make_client, Role.ADMIN)

    data = client.get("/api/admin/approvals").get_json()

    assert len(data["payments"]) == 1
    assert len(data["enrollments"]) == 1


def test_student_cannot_use_admin_endpoints(make_client):
    _, client = _setup(make_client, Role.STUDENT, 5)
    assert client.get("/api/admin/approvals").status_code == 403
    assert client.post("/api/admin/payments/1/approve", json={}).status_code == 403


def test_approve_then_second_decision_is_409(make_client):
    repo, client = _setup(make_client, Role.ADMIN)

    ok = client.post("/api/admin/payments/1/approve", json={})
    assert ok.status_code == 200
    assert ok.get_json()["payments"] == []
    assert repo.payment.status == RequestStatus.COMPLETED

    again = client.post("/api/admin/payments/1/reject", json={"remarks": "late"})
    assert again.status_code == 409
    assert len(repo.notifications) == 1


def test_reject_without_remarks_is_400(make_client):
    repo, client = _setup(make_client, Role.ADMIN)

    resp = client.post("/api/admin/payments/1/reject", json={"remarks": ""})

    assert resp.status_code == 400
    assert repo.payment.status == RequestStatus.PENDING


def test_unknown_payment_is_404(make_client):
    _, client = _setup(make_client, Role.ADMIN)
    assert client.post("/api/admin/payments/99/approve", json={}).status_code == 404


def test_enrollment_decision_route(make_client):
    repo, client = _setup(make_client, Role.ADMIN)

    assert client.post("/api/admin/enrollments/2/completed", json={}).status_code == 400
    resp = client.post("/api/admin/enrollments/2/rejected", json={"remarks": "Course full"})

    assert resp.status_code == 200
    assert repo.enrollment.status == RequestStatus.REJECTED
    assert repo.notifications[-1].recipient_id == 5


def test_student_duplicate_enrollment_is_409(make_client):
    _, client = _setup(make_client, Role.STUDENT, 5)

    assert client.post("/api/student/enrollments", json={"course_id": 3}).status_code == 409
    created = client.post("/api/student/enrollments", json={"course_id": 4})
    assert created.status_code == 201
    assert created.get_json()["enrollment_id"] == 10


def test_student_records_payment(make_client):
    repo, client = _setup(make_client, Role.STUDENT, 5)

    resp = client.post("/api/student/payments", json={"amount": "250.50", "payment_method": "card"})

    assert resp.status_code == 201
    assert resp.get_json()["receipt_number"].startswith("RCPT-")
    assert repo.created_payments[0]["amount"] == Decimal("250.50")
    assert repo.created_payments[0]["student_id"] == 5
