from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_actor, error_response, json_body, login_required, role_required, unexpected_error
from ..container import Container
from ..core.constants import TIME_SLOTS
from ..core.enums import DayOfWeek, Role
from ..core.exceptions import DomainError, ValidationError
from .model import NewScheduledSession


def register(app: Flask, container: Container) -> None:
    @app.route("/api/timetable", methods=["GET"], endpoint="timetable_list")
    @login_required
    def timetable_list():
        class_id = request.args.get("class_id")
        teacher_id = request.args.get("teacher_id")
        try:
            if class_id:
                rows = container.timetable_service.list_for_class(class_id=class_id)
            elif teacher_id:
                rows = container.timetable_service.list_for_teacher(teacher_id=teacher_id)
            else:
                raise ValidationError("class_id or teacher_id is required")
            return jsonify({"success": True, "sessions": list(rows)})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("listing timetable")

    @app.route("/api/timetable/slots", methods=["GET"], endpoint="timetable_slots")
    @login_required
    def timetable_slots():
        return jsonify(
            {
                "success": True,
                "time_slots": TIME_SLOTS,
                "days": [{"value": d.value, "label": d.label} for d in DayOfWeek],
            }
        )

    @app.route("/api/timetable", methods=["POST"], endpoint="timetable_create")
    @role_required(Role.ADMIN)
    def timetable_create():
        data = json_body()
        try:
            entry = NewScheduledSession(
                class_id=data.get("class_id"),
                subject_id=data.get("subject_id"),
                teacher_id=data.get("teacher_id"),
                day_of_week=data.get("day_of_week"),
                start_time=data.get("start_time") or "",
                end_time=data.get("end_time") or "",
            )
            session_id = container.timetable_service.create_session(
                current_role=current_actor().role,
                entry=entry,
            )
            return jsonify({"success": True, "session_id": session_id, "message": "Timetable entry added successfully"}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("adding timetable entry")

    @app.route("/api/timetable/check", methods=["POST"], endpoint="timetable_check")
    @role_required(Role.ADMIN)
    def timetable_check():
        data = json_body()
        try:
            conflicts = container.timetable_service.find_conflicts(
                class_id=data.get("class_id") or 0,
                day_of_week=data.get("day_of_week"),
                start=data.get("start_time") or "",
                end=data.get("end_time") or "",
            )
            return jsonify(
                {
                    "success": True,
                    "has_conflict": bool(conflicts),
                    "conflicts": [c.to_dict() for c in conflicts],
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("checking timetable conflicts")

    @app.route("/api/teacher/assignments", methods=["GET"], endpoint="teacher_assignments")
    @role_required(Role.TEACHER)
    def teacher_assignments():
        try:
            actor = current_actor()
            items = container.timetable_service.list_teaching_assignments(teacher_id=actor.entity_id or 0)
            return jsonify(
                {
                    "success": True,
                    "assignments": [
                        {
                            "class_id": a.class_id,
                            "class_name": a.class_name,
                            "room": a.room or "",
                            "subject_id": a.subject_id,
                            "subject_name": a.subject_name,
                            "subject_code": a.subject_code,
                        }
                        for a in items
                    ],
                }
            )
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("listing teaching assignments")
