from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_actor, error_response, json_body, role_required, unexpected_error
from ..container import Container
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import DomainError, ValidationError
from .model import AttendanceMark


def _parse_marks(items) -> list[AttendanceMark]:
    if not isinstance(items, list):
        raise ValidationError("records must be a list")

    marks: list[AttendanceMark] = []
    for item in items:
        if not isinstance(item, dict):
            raise ValidationError("Invalid attendance record")
        # The marking screen sends a present checkbox; other clients may send the status itself.
        if "status" in item:
            status = item.get("status")
        else:
            status = AttendanceStatus.PRESENT if item.get("present", True) else AttendanceStatus.ABSENT
        marks.append(
            AttendanceMark(
                student_id=item.get("student_id"),
                status=status,
                remarks=item.get("remarks"),
            )
        )
    return marks


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/session", methods=["GET"], endpoint="attendance_session")
    @role_required(Role.TEACHER)
    def attendance_session():
        try:
            actor = current_actor()
            roster = container.attendance_service.resolve_session(
                teacher_id=actor.entity_id or 0,
                class_id=request.args.get("class_id") or 0,
                subject_id=request.args.get("subject_id") or 0,
                attendance_date=parse_iso_date(request.args.get("date") or ""),
            )
            return jsonify({"success": True, "students": [r.to_dict() for r in roster]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("loading attendance session")

    @app.route("/api/attendance/session", methods=["POST"], endpoint="attendance_commit")
    @role_required(Role.TEACHER)
    def attendance_commit():
        data = json_body()
        try:
            actor = current_actor()
            attendance_date = parse_iso_date(data.get("date") or "")
            written = container.attendance_service.commit_session(
                teacher_id=actor.entity_id or 0,
                class_id=data.get("class_id") or 0,
                subject_id=data.get("subject_id") or 0,
                attendance_date=attendance_date,
                marks=_parse_marks(data.get("records") or []),
                overwrite=bool(data.get("overwrite", False)),
            )
            roster = container.attendance_service.resolve_session(
                teacher_id=actor.entity_id or 0,
                class_id=data.get("class_id") or 0,
                subject_id=data.get("subject_id") or 0,
                attendance_date=attendance_date,
            )
            return jsonify(
                {
                    "success": True,
                    "saved": written,
                    "message": "Attendance saved successfully",
                    "students": [r.to_dict() for r in roster],
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("saving attendance")
