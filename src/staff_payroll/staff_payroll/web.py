"""Shared Flask helpers: session role checks and JSON error mapping.

Authentication itself lives outside this package; it is expected to put
``user_id`` and ``role`` into the Flask session.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable

from flask import Flask, jsonify, session

from .core.enums import Role
from .core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def current_role() -> Role:
    return Role(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"success": False, "message": "Not authenticated"}), 401
        try:
            Role(session.get("role"))
        except ValueError:
            return jsonify({"success": False, "message": "Unknown role"}), 403
        return view(*args, **kwargs)

    return wrapper


def roles_required(roles: Iterable[Role]):
    allowed = frozenset(roles)

    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if current_role() not in allowed:
                return jsonify({"success": False, "message": "You do not have permission"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def error_response(e: DomainError):
    if isinstance(e, QuotaExceededError):
        return (
            jsonify(
                {
                    "success": False,
                    "message": str(e),
                    "remaining_quota": e.remaining,
                    "requested_days": e.requested,
                }
            ),
            400,
        )
    status = {
        ValidationError: 400,
        AuthorizationError: 403,
        NotFoundError: 404,
        ConflictError: 409,
    }.get(type(e), 400)
    return jsonify({"success": False, "message": str(e)}), status


def api_view(action: str):
    """Turn domain errors into JSON responses; log anything unexpected as a 500."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                return error_response(e)
            except Exception:
                logger.exception("%s failed", action)
                return jsonify({"success": False, "message": f"Error {action}"}), 500

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"success": False, "message": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"success": False, "message": "Method not allowed"}), 405
