from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import current_app, g, jsonify, request

from racktrack.api.services import Services
from racktrack.sessions.models import Identity

BEARER_PREFIX = "Bearer "


def get_services() -> Services:
    return current_app.extensions["racktrack"]


def bearer_token() -> str | None:
    header = request.headers.get("Authorization")
    if not header:
        return None
    return header.replace(BEARER_PREFIX, "", 1).strip() or None


def current_identity() -> Identity | None:
    """Identity behind the request's bearer token, or None."""
    token = bearer_token()
    if token is None:
        return None
    return get_services().sessions.lookup(token)


def login_required(fn: Callable[..., Any]) -> Callable[..., Any]:
    """Reject requests without a known session. Stores the identity on flask.g."""

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        identity = current_identity()
        if identity is None:
            return jsonify({"success": False, "message": "Not authenticated"}), 401
        g.identity = identity
        return fn(*args, **kwargs)

    return wrapper
