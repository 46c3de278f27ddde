from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Entidade de domínio: usuário do sistema (recepção ou administração).

    Observação: objeto de dados puro (sem acesso a banco).
    """

    user_id: int
    email: str
    password_hash: str
    name: str
    role: Role
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class UserVisitCount:
    """Read-model para o relatório de usuários."""

    user_id: int
    email: str
    name: str
    role: Role
    created_at: datetime
    visits: int

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "createdAt": self.created_at.isoformat(),
            "visitsCount": self.visits,
        }
