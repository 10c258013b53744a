from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from functools import wraps

from flask import jsonify, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    CaptureCancelled,
    DomainError,
    PreconditionViolation,
    ResourceConflict,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_json(value):
    """Dataclass/enum/datetime tree -> JSON-compatible primitives."""

    if hasattr(value, "__dataclass_fields__"):
        return to_json(asdict(value))
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_json(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return value


def error_response(e: Exception):
    if isinstance(e, HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code
    if isinstance(e, ResourceConflict):
        return jsonify({"success": False, "error": "equipment_taken", "equipment_id": e.equipment_id, "message": str(e)}), 409
    if isinstance(e, AuthorizationError):
        return jsonify({"success": False, "message": str(e)}), 403
    if isinstance(e, (PreconditionViolation, ValidationError, CaptureCancelled)):
        return jsonify({"success": False, "message": str(e)}), 400
    if isinstance(e, (DomainError, ValueError)):
        return jsonify({"success": False, "message": str(e)}), 400

    logger.exception("unhandled error")
    return jsonify({"success": False, "message": "Internal error"}), 500


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        return view(*args, **kwargs)

    return wrapper


def employer_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"success": False, "message": "Login required"}), 401
        if session.get("role") != Role.EMPLOYER.value:
            return jsonify({"success": False, "message": "Forbidden"}), 403
        return view(*args, **kwargs)

    return wrapper
