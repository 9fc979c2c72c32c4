from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_actor, error_response, json_body, login_required, role_required, unexpected_error
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from .model import NewNotification


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    def notifications_list():
        try:
            actor = current_actor()
            items = container.notification_service.list_for(
                role=actor.role,
                recipient_id=actor.entity_id,
                unread_only=request.args.get("unread") in {"1", "true"},
                limit=request.args.get("limit", 50, type=int),
            )
            return jsonify({"success": True, "notifications": [n.to_dict() for n in items]})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("listing notifications")

    @app.route("/api/notifications/unread-count", methods=["GET"], endpoint="notifications_unread_count")
    @login_required
    def notifications_unread_count():
        try:
            actor = current_actor()
            count = container.notification_service.unread_count(role=actor.role, recipient_id=actor.entity_id)
            return jsonify({"success": True, "unread": count})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("counting notifications")

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_mark_read")
    @login_required
    def notifications_mark_read(notification_id: int):
        try:
            actor = current_actor()
            container.notification_service.mark_read(
                role=actor.role,
                recipient_id=actor.entity_id,
                notification_id=notification_id,
            )
            return jsonify({"success": True})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("marking notification as read")

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_mark_all_read")
    @login_required
    def notifications_mark_all_read():
        try:
            actor = current_actor()
            updated = container.notification_service.mark_all_read(role=actor.role, recipient_id=actor.entity_id)
            return jsonify({"success": True, "updated": updated})
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("marking notifications as read")

    @app.route("/api/notifications", methods=["POST"], endpoint="notifications_send")
    @role_required(Role.ADMIN)
    def notifications_send():
        data = json_body()
        try:
            try:
                role = Role(data.get("recipient_role"))
            except ValueError:
                raise ValidationError("Recipient role must be admin, teacher or student")

            notification_id = container.notification_service.notify(
                NewNotification(
                    recipient_role=role,
                    recipient_id=data.get("recipient_id"),
                    title=data.get("title") or "",
                    message=data.get("message") or "",
                )
            )
            return jsonify({"success": True, "notification_id": notification_id}), 201
        except DomainError as e:
            return error_response(e)
        except Exception:
            return unexpected_error("sending notification")
