from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_choice, require_text
from ..core.enums import DocumentType, VisitStatus
from ..core.exceptions import AuthError, InvalidStateError, NotFoundError, ValidationError
from ..core.result import as_result
from .lifecycle import INITIAL_STATUS, cancellation_marker, ensure_transition
from .model import NewVisit, Page, Visit
from .repository import VisitRepository

logger = logging.getLogger(__name__)


class VisitService:
    """Visit lifecycle: register, check out, cancel and the read queries.

    Every public method returns ``Ok``/``Err`` (see ``core.result``).
    """

    def __init__(self, visits: VisitRepository):
        self._visits = visits

    def _get(self, visit_id: int) -> Visit:
        visit = self._visits.get_by_id(int(visit_id))
        if not visit:
            raise NotFoundError("Visitante não encontrado")
        return visit

    @as_result
    def register(
        self,
        *,
        visitor_name: str,
        document: str,
        document_type: DocumentType | str,
        relationship: str,
        patient_name: str,
        acting_user_id: Optional[int],
        phone: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Visit:
        new_visit_fields = dict(
            visitor_name=require_text(visitor_name, "Nome", 2),
            document=require_text(document, "Documento", 3),
            document_type=require_choice(document_type, DocumentType, "Tipo de documento"),
            relationship=require_text(relationship, "Relação", 2),
            patient_name=require_text(patient_name, "Nome do paciente", 2),
            phone=optional_text(phone),
            notes=optional_text(notes),
        )

        if acting_user_id is None:
            raise AuthError("Usuário não autenticado")

        now = now or now_local()
        visit_id = self._visits.create(
            NewVisit(user_id=int(acting_user_id), check_in=now, created_at=now, **new_visit_fields)
        )
        logger.info("visit registered visit_id=%s user_id=%s status=%s", visit_id, acting_user_id, INITIAL_STATUS.value)
        return self._get(visit_id)

    @as_result
    def check_out(self, visit_id: int, *, now: Optional[datetime] = None) -> Visit:
        visit = self._get(visit_id)
        ensure_transition(visit.status, VisitStatus.COMPLETED)

        check_out_time = max(now or now_local(), visit.check_in)
        if not self._visits.complete_if_active(visit_id=visit.visit_id, check_out=check_out_time):
            logger.warning("check-out lost race visit_id=%s", visit.visit_id)
            raise InvalidStateError("Visitante já fez check-out ou visita foi cancelada")

        logger.info("visit completed visit_id=%s", visit.visit_id)
        return self._get(visit.visit_id)

    @as_result
    def cancel(self, visit_id: int, *, now: Optional[datetime] = None) -> Visit:
        visit = self._get(visit_id)
        ensure_transition(visit.status, VisitStatus.CANCELLED)

        marker = cancellation_marker(now or now_local())
        if not self._visits.cancel_if_active(visit_id=visit.visit_id, marker=marker):
            logger.warning("cancel lost race visit_id=%s", visit.visit_id)
            raise InvalidStateError("Só é possível cancelar visitas ativas")

        logger.info("visit cancelled visit_id=%s", visit.visit_id)
        return self._get(visit.visit_id)

    @as_result
    def get_active(self) -> list[Visit]:
        return list(self._visits.list_active())

    @as_result
    def get_by_id(self, visit_id: int) -> Visit:
        return self._get(visit_id)

    @as_result
    def list_paged(self, page: int, page_size: int, status_filter=None) -> Page[Visit]:
        page, page_size = int(page), int(page_size)
        if page < 1:
            raise ValidationError("Página deve ser maior ou igual a 1")
        if page_size < 1:
            raise ValidationError("Limite deve ser maior ou igual a 1")

        status = VisitStatus.parse_optional(status_filter)
        items = self._visits.list_page(offset=(page - 1) * page_size, limit=page_size, status=status)
        total = self._visits.count(status=status)
        return Page(items=list(items), total=total, page=page, page_size=page_size)
