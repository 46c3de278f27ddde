from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_user_id, error_response, json_body, login_required
from ..container import Container
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from ..core.exceptions import ValidationError
from ..core.result import Err


def _parse_int(value, default: int, message: str) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)


def register(app: Flask, container: Container) -> None:
    svc = container.visit_service

    def _visit_id(raw: str) -> int:
        return _parse_int(raw, -1, "ID do visitante inválido")

    @app.route("/api/visitors", methods=["POST"], endpoint="visitors_create")
    @login_required
    def create_visitor():
        payload = json_body()
        result = svc.register(
            visitor_name=payload.get("name"),
            document=payload.get("document"),
            document_type=payload.get("documentType"),
            relationship=payload.get("relationship"),
            patient_name=payload.get("patientName"),
            phone=payload.get("phone"),
            notes=payload.get("notes"),
            acting_user_id=current_user_id(),
        )
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify({"message": "Visitante registrado com sucesso", "visitor": result.value.to_dict()}), 201

    @app.route("/api/visitors/active", methods=["GET"], endpoint="visitors_active")
    @login_required
    def active_visitors():
        result = svc.get_active()
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify({"count": len(result.value), "visitors": [v.to_dict() for v in result.value]})

    @app.route("/api/visitors", methods=["GET"], endpoint="visitors_list")
    @login_required
    def list_visitors():
        try:
            page = _parse_int(request.args.get("page"), DEFAULT_PAGE, "Página inválida")
            limit = _parse_int(request.args.get("limit"), DEFAULT_PAGE_SIZE, "Limite inválido")
        except ValidationError as e:
            return error_response(e)

        result = svc.list_paged(page, limit, request.args.get("status"))
        if isinstance(result, Err):
            return error_response(result.error)

        data = result.value
        return jsonify(
            {
                "visitors": [v.to_dict() for v in data.items],
                "pagination": {
                    "page": data.page,
                    "limit": data.page_size,
                    "total": data.total,
                    "pages": data.pages,
                },
            }
        )

    @app.route("/api/visitors/<visit_id>", methods=["GET"], endpoint="visitors_get")
    @login_required
    def get_visitor(visit_id: str):
        try:
            vid = _visit_id(visit_id)
        except ValidationError as e:
            return error_response(e)

        result = svc.get_by_id(vid)
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify({"visitor": result.value.to_dict()})

    @app.route("/api/visitors/<visit_id>/checkout", methods=["PATCH"], endpoint="visitors_checkout")
    @login_required
    def checkout_visitor(visit_id: str):
        try:
            vid = _visit_id(visit_id)
        except ValidationError as e:
            return error_response(e)

        result = svc.check_out(vid)
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify({"message": "Check-out realizado com sucesso", "visitor": result.value.to_dict()})

    @app.route("/api/visitors/<visit_id>/cancel", methods=["PATCH"], endpoint="visitors_cancel")
    @login_required
    def cancel_visit(visit_id: str):
        try:
            vid = _visit_id(visit_id)
        except ValidationError as e:
            return error_response(e)

        result = svc.cancel(vid)
        if isinstance(result, Err):
            return error_response(result.error)
        return jsonify({"message": "Visita cancelada com sucesso", "visitor": result.value.to_dict()})
