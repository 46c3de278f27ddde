from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} deve ter no mínimo {min_len} caracteres")
    return value


def require_text(value: Optional[str], field_name: str, min_len: int = 1) -> str:
    return require_min_length(require_non_empty(value, field_name), field_name, min_len)


def require_choice(value, enum_cls: Type[E], field_name: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} inválido (valores aceitos: {allowed})")


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Email inválido")
    return email


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None
