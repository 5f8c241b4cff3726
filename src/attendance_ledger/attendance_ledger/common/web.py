from __future__ import annotations

from datetime import datetime
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.enums import EventKind
from ..core.exceptions import ValidationError
from ..attendance.model import parse_kind
from ..container import Container
from ..users.model import AuthContext
from .datetime_utils import parse_timestamp

SESSION_TOKEN_KEY = "auth_token"


def current_context(container: Container) -> AuthContext:
    """Auth context of the browser session; a kiosk session is opened on first use."""

    ctx = container.auth_service.resolve(session.get(SESSION_TOKEN_KEY))
    if ctx is None:
        ctx = container.auth_service.open_kiosk_session()
        session[SESSION_TOKEN_KEY] = ctx.token
    return ctx


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value is None or value == "":
        raise ValidationError(f"Missing field: {name}")
    return value


def kind_field(data: dict[str, Any], name: str = "type") -> EventKind:
    return parse_kind(require_field(data, name))


def timestamp_field(data: dict[str, Any], name: str = "timestamp") -> datetime:
    return parse_timestamp(require_field(data, name))


def ok(status: int = 200, **payload):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int = 404):
    return jsonify({"success": False, "message": message}), status


def optional_arg(name: str) -> Optional[str]:
    value = request.args.get(name, "").strip()
    return value or None


def admin_required(container: Container):
    """Reject non-admin sessions before the view runs (services check again)."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not current_context(container).is_admin:
                return jsonify({"success": False, "message": "Administrator access required"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator
