from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Order matters: subclasses before their bases.
ERROR_STATUS = (
    (AuthorizationError, 403),
    (InvalidTransitionError, 409),
    (NotFoundError, 404),
    (ValidationError, 400),
)


def current_role() -> Role:
    return Role(session["role"])


def current_user_id() -> str:
    return str(session["user_id"])


def role_required(*roles: Role):
    """Session guard. Login itself is handled outside this package."""
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session or "role" not in session:
                return jsonify(error="Please sign in to continue"), 401
            if session.get("role") not in allowed:
                return jsonify(error="You do not have access to this page"), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def payload() -> dict:
    """Request body as a dict, from JSON or a submitted form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def domain_error_response(e: DomainError):
    for error_type, status in ERROR_STATUS:
        if isinstance(e, error_type):
            return jsonify(error=str(e)), status
    return jsonify(error=str(e)), 400


def system_error_response(action: str):
    logger.exception("Unexpected error while %s", action)
    return jsonify(error=f"System error while {action}"), 500
