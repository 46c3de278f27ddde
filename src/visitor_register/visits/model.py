from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Optional, Sequence, TypeVar

from ..core.enums import DocumentType, VisitStatus

T = TypeVar("T")


@dataclass(frozen=True)
class VisitOwner:
    """Dados do usuário que registrou a visita."""

    name: str
    email: Optional[str] = None

    def to_dict(self) -> dict:
        return {"name": self.name, "email": self.email}


@dataclass(frozen=True)
class NewVisit:
    """Dados validados para criar uma visita."""

    visitor_name: str
    document: str
    document_type: DocumentType
    relationship: str
    patient_name: str
    phone: Optional[str]
    notes: Optional[str]
    user_id: int
    check_in: datetime
    created_at: datetime


@dataclass(frozen=True)
class Visit:
    """Entidade de domínio: visita de um visitante a um paciente."""

    visit_id: int
    visitor_name: str
    document: str
    document_type: DocumentType
    relationship: str
    patient_name: str
    check_in: datetime
    status: VisitStatus
    user_id: int
    created_at: datetime
    phone: Optional[str] = None
    notes: Optional[str] = None
    check_out: Optional[datetime] = None
    registered_by: Optional[VisitOwner] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.visit_id,
            "name": self.visitor_name,
            "document": self.document,
            "documentType": self.document_type.value,
            "phone": self.phone,
            "relationship": self.relationship,
            "patientName": self.patient_name,
            "notes": self.notes,
            "checkIn": self.check_in.isoformat(),
            "checkOut": self.check_out.isoformat() if self.check_out else None,
            "status": self.status.value,
            "userId": self.user_id,
            "createdAt": self.created_at.isoformat(),
            "user": self.registered_by.to_dict() if self.registered_by else None,
        }


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0
