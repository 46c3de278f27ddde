from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_choice, require_email, require_text
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..core.result import as_result
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    email: str
    name: str
    role: Role

    def to_dict(self) -> dict:
        return {"id": self.user_id, "email": self.email, "name": self.name, "role": self.role.value}


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    @as_result
    def authenticate(self, email: str, password: str) -> SessionUser:
        if not (email or "").strip() or not password:
            raise ValidationError("Email e senha são obrigatórios")

        user = self._users.get_by_email(email.strip().lower())
        if not user:
            raise AuthenticationError("Credenciais inválidas")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("failed login for user_id=%s", user.user_id)
            raise AuthenticationError("Credenciais inválidas")

        return SessionUser(user_id=user.user_id, email=user.email, name=user.name, role=user.role)


class UserService:
    """Use case: manage user accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    @as_result
    def register(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: Role | str | None = None,
        now: Optional[datetime] = None,
    ) -> User:
        email = require_email(email)
        if password is None or len(password) < 6:
            raise ValidationError("Senha deve ter no mínimo 6 caracteres")
        name = require_text(name, "Nome", 2)
        role = require_choice(role, Role, "Perfil") if role else Role.RECEPCAO

        if self._users.get_by_email(email):
            raise ValidationError("Usuário já existe")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=role,
            created_at=now or now_local(),
        )
        logger.info("user registered user_id=%s role=%s", user_id, role.value)
        return self._users.get_by_id(user_id)

    @as_result
    def get_profile(self, user_id: Optional[int]) -> User:
        user = self._users.get_by_id(int(user_id)) if user_id is not None else None
        if not user:
            raise NotFoundError("Usuário não encontrado")
        return user
