"""Shared helpers for the JSON controllers: session guards and error mapping."""

from __future__ import annotations

from functools import wraps

from flask import jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthError,
    AuthorizationError,
    DomainError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidStateError, 409),
)


def status_for(error: DomainError) -> int:
    for error_cls, status in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            return status
    return 400


def error_response(error: DomainError):
    return jsonify({"error": str(error)}), status_for(error)


def json_body() -> dict:
    """Request JSON as a dict; anything that is not a JSON object reads as empty."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def current_user_id():
    user_id = session.get("user_id")
    return int(user_id) if user_id is not None else None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(AuthError("Usuário não autenticado"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response(AuthError("Usuário não autenticado"))
        if session.get("role") != Role.ADMIN.value:
            return error_response(AuthorizationError("Acesso restrito a administradores"))
        return view(*args, **kwargs)

    return wrapper
