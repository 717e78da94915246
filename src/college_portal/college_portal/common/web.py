from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Role
from ..users.model import Principal, principal_from_dict

logger = logging.getLogger(__name__)

SESSION_KEY = "principal"


def current_principal() -> Optional[Principal]:
    data = session.get(SESSION_KEY)
    if not data:
        return None
    try:
        return principal_from_dict(data)
    except (KeyError, TypeError, ValueError):
        # Stale cookie from an older layout.
        session.pop(SESSION_KEY, None)
        return None


def json_error(message: str, status: int, **extra):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def request_data() -> dict:
    """JSON body, falling back to form fields."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_principal() is None:
            return json_error("Please log in to continue", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = current_principal()
            if principal is None:
                return json_error("Please log in to continue", 401)
            if principal.kind not in allowed:
                return json_error("You do not have access to this page", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def internal_error(what: str):
    logger.exception("Unexpected error while %s", what)
    return json_error(f"System error while {what}", 500)
