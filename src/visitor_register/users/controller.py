from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import current_user_id, error_response, json_body, login_required
from ..container import Container
from ..core.enums import Role
from ..core.result import Err
from .service import SessionUser


def register(app: Flask, container: Container) -> None:
    def _start_session(s_user: SessionUser) -> None:
        session.clear()
        session.permanent = True
        session["user_id"] = s_user.user_id
        session["name"] = s_user.name
        session["role"] = s_user.role.value

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        payload = json_body()
        result = container.auth_service.authenticate(payload.get("email", ""), payload.get("password", ""))
        if isinstance(result, Err):
            return error_response(result.error)

        _start_session(result.value)
        app.logger.info("login user_id=%s", result.value.user_id)
        return jsonify({"user": result.value.to_dict()})

    @app.route("/api/auth/register", methods=["POST"], endpoint="auth_register")
    def register_account():
        payload = json_body()
        # Only an admin may pick the role; admins also keep their own session.
        by_admin = session.get("role") == Role.ADMIN.value
        result = container.user_service.register(
            email=payload.get("email", ""),
            password=payload.get("password", ""),
            name=payload.get("name", ""),
            role=payload.get("role") if by_admin else None,
        )
        if isinstance(result, Err):
            return error_response(result.error)

        user = result.value
        if by_admin:
            return jsonify({"user": user.to_dict()}), 201
        _start_session(SessionUser(user_id=user.user_id, email=user.email, name=user.name, role=user.role))
        return jsonify({"user": user.to_dict()}), 201

    @app.route("/api/auth/logout", methods=["POST"], endpoint="auth_logout")
    def logout():
        session.clear()
        return jsonify({"message": "Sessão encerrada"})

    @app.route("/api/auth/profile", methods=["GET"], endpoint="auth_profile")
    @login_required
    def profile():
        result = container.user_service.get_profile(current_user_id())
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify({"user": result.value.to_dict()})
