from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Perfil do usuário usado para autorização."""

    ADMIN = "ADMIN"
    RECEPCAO = "RECEPCAO"


class DocumentType(str, Enum):
    """Tipo de documento apresentado pelo visitante."""

    CPF = "CPF"
    RG = "RG"
    CNH = "CNH"
    OUTRO = "OUTRO"


class VisitStatus(str, Enum):
    """Estado da visita. ACTIVE é o único estado inicial."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse_optional(cls, value) -> Optional["VisitStatus"]:
        """Return the matching status, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None
