from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_actor, error_response, json_body, role_required, unexpected_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    def _pending_payload(message: str):
        pending = container.approval_service.list_pending(current_role=Role.ADMIN)
        return jsonify({"success": True, "message": message, **pending})

    @app.route("/api/admin/approvals", methods=["GET"], endpoint="admin_approvals")
    @role_required(Role.ADMIN)
    def admin_approvals():
        try:
            pending = container.approval_service.list_pending(
                current_role=current_actor().role,
                limit=request.args.get("limit", 200, type=int),
            )
            return jsonify({"success": True, **pending})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("listing pending approvals")

    @app.route("/api/admin/payments/<int:payment_id>/approve", methods=["POST"], endpoint="admin_payment_approve")
    @role_required(Role.ADMIN)
    def admin_payment_approve(payment_id: int):
        data = json_body()
        try:
            actor = current_actor()
            container.approval_service.approve_payment(
                current_role=actor.role,
                admin_user_id=actor.user_id,
                payment_id=payment_id,
                remarks=data.get("remarks"),
            )
            return _pending_payload("Payment approved")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("approving payment")

    @app.route("/api/admin/payments/<int:payment_id>/reject", methods=["POST"], endpoint="admin_payment_reject")
    @role_required(Role.ADMIN)
    def admin_payment_reject(payment_id: int):
        data = json_body()
        try:
            actor = current_actor()
            container.approval_service.reject_payment(
                current_role=actor.role,
                admin_user_id=actor.user_id,
                payment_id=payment_id,
                remarks=data.get("remarks"),
            )
            return _pending_payload("Payment rejected")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("rejecting payment")

    @app.route(
        "/api/admin/enrollments/<int:enrollment_id>/<decision>",
        methods=["POST"],
        endpoint="admin_enrollment_decide",
    )
    @role_required(Role.ADMIN)
    def admin_enrollment_decide(enrollment_id: int, decision: str):
        data = json_body()
        try:
            actor = current_actor()
            container.approval_service.process_enrollment_request(
                current_role=actor.role,
                admin_user_id=actor.user_id,
                enrollment_id=enrollment_id,
                status=decision,
                remarks=data.get("remarks"),
            )
            return _pending_payload(f"Enrollment {decision}")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("processing enrollment request")

    @app.route("/api/student/enrollments", methods=["POST"], endpoint="student_enrollment_create")
    @role_required(Role.STUDENT)
    def student_enrollment_create():
        data = json_body()
        try:
            actor = current_actor()
            enrollment_id = container.approval_service.request_course_enrollment(
                current_role=actor.role,
                student_id=actor.entity_id or 0,
                course_id=data.get("course_id") or 0,
                academic_year=data.get("academic_year"),
                semester=data.get("semester"),
            )
            return (
                jsonify(
                    {
                        "success": True,
                        "enrollment_id": enrollment_id,
                        "message": "Enrollment request submitted for approval",
                    }
                ),
                201,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("requesting course enrollment")

    @app.route("/api/student/payments", methods=["POST"], endpoint="student_payment_create")
    @role_required(Role.STUDENT)
    def student_payment_create():
        data = json_body()
        try:
            actor = current_actor()
            payment_id, receipt = container.approval_service.record_fee_payment(
                current_role=actor.role,
                student_id=actor.entity_id or 0,
                fee_structure_id=data.get("fee_structure_id"),
                amount=data.get("amount"),
                payment_method=data.get("payment_method") or "",
                transaction_id=data.get("transaction_id"),
            )
            return (
                jsonify(
                    {
                        "success": True,
                        "payment_id": payment_id,
                        "receipt_number": receipt,
                        "message": "Payment submitted for approval",
                    }
                ),
                201,
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("recording fee payment")

    @app.route("/api/student/requests", methods=["GET"], endpoint="student_requests")
    @role_required(Role.STUDENT)
    def student_requests():
        try:
            data = container.approval_service.list_for_student(student_id=current_actor().entity_id or 0)
            return jsonify({"success": True, **data})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("listing student requests")
