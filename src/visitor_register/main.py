from __future__ import annotations

import importlib
import logging
from datetime import datetime, timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .reports.controller import register as register_reports
from .users.controller import register as register_users
from .visits.controller import register as register_visits

API_VERSION = "1.0.0"


def _register_core_routes(app: Flask, settings_module: str) -> None:
    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(
            {
                "status": "OK",
                "message": "Servidor do Sistema de Visitas está funcionando!",
                "timestamp": datetime.now().isoformat(),
                "environment": settings_module.rsplit(".", 1)[-1],
            }
        )

    @app.route("/api", methods=["GET"], endpoint="api_index")
    def api_index():
        return jsonify(
            {
                "message": "Bem-vindo ao Sistema de Registro de Visitas!",
                "version": API_VERSION,
                "documentation": "/api/health",
            }
        )

    @app.errorhandler(404)
    def not_found(_e):
        return jsonify({"error": f"Endpoint não encontrado: {request.method} {request.path}"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"error": f"Método não permitido: {request.method} {request.path}"}), 405

    @app.errorhandler(Exception)
    def unexpected_error(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        app.logger.exception("unhandled error on %s %s", request.method, request.path)
        body = {"error": "Erro interno do servidor"}
        if app.config["DEBUG"]:
            body["message"] = str(e)
        return jsonify(body), 500


def create_app(*, settings_module: Optional[str] = None, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            app.logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)

        container = build_container(db_config=db_config)

    app.extensions["visitor_register.container"] = container

    register_users(app, container)
    register_visits(app, container)
    register_reports(app, container)
    _register_core_routes(app, settings_module)

    return app
