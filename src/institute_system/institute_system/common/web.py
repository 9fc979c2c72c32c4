"""Helpers shared by the JSON controllers.

The acting user lives in the Flask session (populated by the login gateway):
``user_id``, ``role`` and, for teachers/students, ``entity_id`` (the
teacher_id / student_id the role refers to).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConfirmationRequiredError,
    ConflictError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .app_logger import get_logger

logger = get_logger("web")

GENERIC_ERROR_MESSAGE = "System error, please try again"

_STATUS_BY_ERROR: tuple[tuple[type, int], ...] = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ConfirmationRequiredError, 409),
    (InvalidTransitionError, 409),
)


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: Role
    entity_id: Optional[int] = None


def current_actor() -> Actor:
    entity_id = session.get("entity_id")
    return Actor(
        user_id=int(session["user_id"]),
        role=Role(session.get("role")),
        entity_id=int(entity_id) if entity_id is not None else None,
    )


def role_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"success": False, "message": "Please log in to continue"}), 401
            if allowed and session.get("role") not in allowed:
                return jsonify({"success": False, "message": "You do not have permission"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


login_required = role_required()


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(e: DomainError):
    if isinstance(e, PersistenceError):
        return jsonify({"success": False, "message": GENERIC_ERROR_MESSAGE}), 500

    status = 400
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            status = code
            break

    payload: dict = {"success": False, "message": str(e)}
    if isinstance(e, ConflictError):
        payload["conflicts"] = [c.to_dict() if hasattr(c, "to_dict") else c for c in e.conflicts]
    if isinstance(e, ConfirmationRequiredError):
        payload["requires_confirmation"] = True
    return jsonify(payload), status


def unexpected_error(action: str):
    logger.exception("unexpected error while %s", action)
    return jsonify({"success": False, "message": GENERIC_ERROR_MESSAGE}), 500
