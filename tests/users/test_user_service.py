from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from visitor_register.core.enums import Role
from visitor_register.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from visitor_register.users.service import AuthService, UserService


def test_register_defaults_to_reception_role(users_repo, fixed_now):
    user = UserService(users_repo).register(
        email="Nova@CasaApoio.com", password="segredo1", name="Nova Recepcionista", now=fixed_now
    ).unwrap()

    assert user.email == "nova@casaapoio.com"
    assert user.role == Role.RECEPCAO
    assert user.created_at == fixed_now
    assert check_password_hash(user.password_hash, "segredo1")


def test_register_admin_role(users_repo):
    user = UserService(users_repo).register(email="chefe@casaapoio.com", password="segredo1", name="Chefe", role="ADMIN").unwrap()

    assert user.role == Role.ADMIN


@pytest.mark.parametrize(
    "fields",
    [
        {"email": "sem-arroba", "password": "segredo1", "name": "Ana"},
        {"email": "ana@casaapoio.com", "password": "123", "name": "Ana"},
        {"email": "ana@casaapoio.com", "password": "segredo1", "name": "A"},
        {"email": "ana@casaapoio.com", "password": "segredo1", "name": "Ana", "role": "MEDICO"},
    ],
)
def test_register_validation(users_repo, fields):
    result = UserService(users_repo).register(**fields)

    assert isinstance(result.error, ValidationError)


def test_register_duplicate_email(users_repo, receptionist):
    result = UserService(users_repo).register(email=receptionist.email, password="segredo1", name="Outra")

    assert isinstance(result.error, ValidationError)
    assert str(result.error) == "Usuário já existe"


def test_authenticate(users_repo, receptionist):
    auth = AuthService(users_repo)

    ok = auth.authenticate("recepcao@casaapoio.com", "recepcao123").unwrap()
    wrong = auth.authenticate("recepcao@casaapoio.com", "errada")
    unknown = auth.authenticate("ninguem@casaapoio.com", "recepcao123")

    assert ok.user_id == receptionist.user_id
    assert ok.role == Role.RECEPCAO
    assert isinstance(wrong.error, AuthenticationError)
    assert isinstance(unknown.error, AuthenticationError)
    assert str(wrong.error) == str(unknown.error) == "Credenciais inválidas"


def test_authenticate_with_corrupted_hash(users_repo, fixed_now):
    users_repo.create_user(
        email="legado@casaapoio.com", password_hash="CHANGE_ME", name="Legado", role=Role.RECEPCAO, created_at=fixed_now
    )

    result = AuthService(users_repo).authenticate("legado@casaapoio.com", "qualquer")

    assert isinstance(result.error, AuthenticationError)


def test_profile(users_repo, admin):
    svc = UserService(users_repo)

    assert svc.get_profile(admin.user_id).unwrap().name == "Administrador Sistema"
    assert isinstance(svc.get_profile(404).error, NotFoundError)
    assert isinstance(svc.get_profile(None).error, NotFoundError)
