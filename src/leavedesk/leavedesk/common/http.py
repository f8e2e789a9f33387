from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, DomainError, ValidationError
from .rbac import check_authorization

logger = logging.getLogger(__name__)

PUBLIC_ENDPOINTS = {"login", "health", "static"}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return jsonify({"error": str(error)}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"error": error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(error) if app.config.get("DEBUG") else "Internal Server Error"
        return jsonify({"error": message}), 500


def register_access_policy(app: Flask) -> None:
    """Require a session on every API route and apply the path role policy."""

    @app.before_request
    def enforce_policy():
        if request.endpoint in PUBLIC_ENDPOINTS or not request.path.startswith("/api"):
            return None
        if "user_id" not in session:
            return jsonify({"error": "Unauthorized"}), 401
        if not check_authorization(request.path, session.get("role", "")):
            return jsonify({"error": "Forbidden"}), 403
        return None


def current_user_id() -> str:
    user_id = session.get("user_id")
    if not user_id:
        raise AuthenticationError("Unauthorized")
    return str(user_id)


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        raise AuthenticationError("Unauthorized")


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")
    return data


def int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def optional_arg(name: str) -> Optional[str]:
    value = (request.args.get(name) or "").strip()
    return value or None
