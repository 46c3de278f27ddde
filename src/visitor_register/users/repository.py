from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User, UserVisitCount


class UserRepository(Protocol):
    """Interface de repositório para User.

    Observação (DIP): a camada de serviço depende desta interface, não de um banco concreto.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def list_with_visit_counts(self) -> Sequence[UserVisitCount]:
        """Users ordered by created_at descending."""

        raise NotImplementedError
