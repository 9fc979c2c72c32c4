from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import today_local
from ..common.web import current_actor, error_response, role_required, unexpected_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    def _csv_response(text: str, filename: str):
        return app.response_class(
            text.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/export.csv", methods=["GET"], endpoint="attendance_export_csv")
    @role_required(Role.TEACHER)
    def attendance_export_csv():
        try:
            text = container.report_service.export_teacher_csv(
                teacher_id=current_actor().entity_id or 0,
                class_id=request.args.get("class_id", type=int),
                subject_id=request.args.get("subject_id", type=int),
            )
            return _csv_response(text, f"attendance_{today_local().strftime('%Y-%m-%d')}.csv")
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("exporting attendance")

    @app.route("/api/student/attendance/summary", methods=["GET"], endpoint="student_attendance_summary")
    @role_required(Role.STUDENT)
    def student_attendance_summary():
        try:
            summary = container.report_service.build_student_summary(student_id=current_actor().entity_id or 0)
            return jsonify({"success": True, **summary.to_dict()})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("building attendance summary")
