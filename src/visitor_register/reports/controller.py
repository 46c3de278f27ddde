from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import Flask, jsonify, request

from ..common.http import admin_required, error_response, login_required
from ..common.validators import require_choice
from ..container import Container
from ..core.enums import DocumentType, VisitStatus
from ..core.exceptions import ValidationError
from ..core.result import Err
from .model import ReportFilter


def _parse_datetime(value: Optional[str], field_name: str) -> Optional[datetime]:
    v = (value or "").strip()
    if not v:
        return None
    if v.endswith(("Z", "z")):
        v = v[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(v)
    except ValueError:
        raise ValidationError(f"{field_name} inválida (use AAAA-MM-DD)")
    # Stored timestamps are naive local time.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _filter_from_args(args) -> ReportFilter:
    document_type = args.get("documentType")
    return ReportFilter(
        start=_parse_datetime(args.get("startDate"), "Data inicial"),
        end=_parse_datetime(args.get("endDate"), "Data final"),
        status=VisitStatus.parse_optional(args.get("status")),
        document_type=require_choice(document_type, DocumentType, "Tipo de documento") if document_type else None,
        relationship=args.get("relationship"),
    )


def register(app: Flask, container: Container) -> None:
    svc = container.report_service

    @app.route("/api/reports/visits", methods=["GET"], endpoint="reports_visits")
    @login_required
    def visits_report():
        try:
            report_filter = _filter_from_args(request.args)
        except ValidationError as e:
            return error_response(e)

        result = svc.build_visits_report(report_filter)
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify(result.value.to_dict())

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="reports_dashboard")
    @login_required
    def dashboard():
        result = svc.dashboard()
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify(result.value.to_dict())

    @app.route("/api/reports/users", methods=["GET"], endpoint="reports_users")
    @admin_required
    def users_report():
        result = svc.users_report()
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify(result.value.to_dict())
