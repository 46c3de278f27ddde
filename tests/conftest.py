from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from visitor_register.container import build_services
from visitor_register.core.enums import DocumentType, Role, VisitStatus
from visitor_register.main import create_app
from visitor_register.users.model import User, UserVisitCount
from visitor_register.visits.lifecycle import append_note
from visitor_register.visits.model import NewVisit, Visit, VisitOwner


class InMemoryUsers:
    def __init__(self):
        self._by_id: dict[int, User] = {}
        self._id = 0
        self.visits: Optional["InMemoryVisits"] = None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.email == email), None)

    def create_user(self, *, email, password_hash, name, role, created_at) -> int:
        self._id += 1
        self._by_id[self._id] = User(
            user_id=self._id,
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            created_at=created_at,
        )
        return self._id

    def count(self) -> int:
        return len(self._by_id)

    def list_with_visit_counts(self):
        rows = []
        for u in self._by_id.values():
            visits = self.visits.count_for_user(u.user_id) if self.visits else 0
            rows.append(
                UserVisitCount(
                    user_id=u.user_id,
                    email=u.email,
                    name=u.name,
                    role=u.role,
                    created_at=u.created_at,
                    visits=visits,
                )
            )
        rows.sort(key=lambda r: (r.created_at, r.user_id), reverse=True)
        return rows


def _report_matches(report_filter, visit: Visit) -> bool:
    """Same predicate the MySQL repository expresses as WHERE clauses."""
    f = report_filter
    if f.start is not None and visit.created_at < f.start:
        return False
    if f.end is not None and visit.created_at > f.end:
        return False
    if f.status is not None and visit.status != f.status:
        return False
    if f.document_type is not None and visit.document_type != f.document_type:
        return False
    if f.relationship and f.relationship.lower() not in visit.relationship.lower():
        return False
    return True


class InMemoryVisits:
    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._rows: dict[int, Visit] = {}
        self._id = 0
        self._users = users

    def _attach_owner(self, visit: Visit) -> Visit:
        user = self._users.get_by_id(visit.user_id) if self._users else None
        if not user:
            return visit
        return replace(visit, registered_by=VisitOwner(name=user.name, email=user.email))

    def _newest_first(self, rows):
        return sorted(rows, key=lambda v: (v.created_at, v.visit_id), reverse=True)

    def add(self, visit: Visit) -> Visit:
        """Store a fully built visit (test seeding helper)."""
        self._id = max(self._id, visit.visit_id)
        self._rows[visit.visit_id] = visit
        return visit

    def create(self, visit: NewVisit) -> int:
        self._id += 1
        self._rows[self._id] = Visit(
            visit_id=self._id,
            visitor_name=visit.visitor_name,
            document=visit.document,
            document_type=visit.document_type,
            relationship=visit.relationship,
            patient_name=visit.patient_name,
            check_in=visit.check_in,
            status=VisitStatus.ACTIVE,
            user_id=visit.user_id,
            created_at=visit.created_at,
            phone=visit.phone,
            notes=visit.notes,
        )
        return self._id

    def get_by_id(self, visit_id: int) -> Optional[Visit]:
        visit = self._rows.get(int(visit_id))
        return self._attach_owner(visit) if visit else None

    def complete_if_active(self, *, visit_id: int, check_out: datetime) -> bool:
        visit = self._rows.get(int(visit_id))
        if not visit or visit.status != VisitStatus.ACTIVE:
            return False
        self._rows[visit.visit_id] = replace(visit, status=VisitStatus.COMPLETED, check_out=check_out)
        return True

    def cancel_if_active(self, *, visit_id: int, marker: str) -> bool:
        visit = self._rows.get(int(visit_id))
        if not visit or visit.status != VisitStatus.ACTIVE:
            return False
        self._rows[visit.visit_id] = replace(visit, status=VisitStatus.CANCELLED, notes=append_note(visit.notes, marker))
        return True

    def list_active(self):
        rows = [self._attach_owner(v) for v in self._rows.values() if v.status == VisitStatus.ACTIVE]
        return sorted(rows, key=lambda v: (v.check_in, v.visit_id), reverse=True)

    def list_page(self, *, offset: int, limit: int, status=None):
        rows = [v for v in self._rows.values() if status is None or v.status == status]
        return [self._attach_owner(v) for v in self._newest_first(rows)[offset : offset + limit]]

    def count(self, *, status=None) -> int:
        return sum(1 for v in self._rows.values() if status is None or v.status == status)

    def count_for_user(self, user_id: int) -> int:
        return sum(1 for v in self._rows.values() if v.user_id == user_id)

    def count_created_between(self, *, start: datetime, end: datetime) -> int:
        return sum(1 for v in self._rows.values() if start <= v.created_at < end)

    def list_recent(self, *, limit: int):
        return [self._attach_owner(v) for v in self._newest_first(self._rows.values())[:limit]]

    def relationship_counts(self, *, limit: int):
        counts: dict[str, int] = {}
        for v in self._rows.values():
            counts[v.relationship] = counts.get(v.relationship, 0) + 1
        return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]

    def find_for_report(self, report_filter):
        rows = [v for v in self._rows.values() if _report_matches(report_filter, v)]
        return [self._attach_owner(v) for v in self._newest_first(rows)]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def visits_repo(users_repo) -> InMemoryVisits:
    repo = InMemoryVisits(users_repo)
    users_repo.visits = repo
    return repo


@pytest.fixture
def receptionist(users_repo, fixed_now) -> User:
    user_id = users_repo.create_user(
        email="recepcao@casaapoio.com",
        password_hash=generate_password_hash("recepcao123"),
        name="Maria da Recepção",
        role=Role.RECEPCAO,
        created_at=fixed_now - timedelta(days=10),
    )
    return users_repo.get_by_id(user_id)


@pytest.fixture
def admin(users_repo, fixed_now) -> User:
    user_id = users_repo.create_user(
        email="admin@casaapoio.com",
        password_hash=generate_password_hash("admin123"),
        name="Administrador Sistema",
        role=Role.ADMIN,
        created_at=fixed_now - timedelta(days=20),
    )
    return users_repo.get_by_id(user_id)


@pytest.fixture
def make_visit(visits_repo, fixed_now):
    """Seed a visit directly into the fake store."""

    def _make(
        *,
        status: VisitStatus = VisitStatus.ACTIVE,
        created_at: Optional[datetime] = None,
        relationship: str = "Filho",
        document_type: DocumentType = DocumentType.CPF,
        user_id: int = 1,
        notes: Optional[str] = None,
    ) -> Visit:
        created_at = created_at or fixed_now
        visit_id = visits_repo._id + 1
        return visits_repo.add(
            Visit(
                visit_id=visit_id,
                visitor_name=f"Visitante {visit_id}",
                document=f"000.000.000-{visit_id:02d}",
                document_type=document_type,
                relationship=relationship,
                patient_name="Maria Santos Silva",
                check_in=created_at,
                status=status,
                user_id=user_id,
                created_at=created_at,
                notes=notes,
                check_out=created_at + timedelta(hours=1) if status == VisitStatus.COMPLETED else None,
            )
        )

    return _make


@pytest.fixture
def container(users_repo, visits_repo):
    return build_services(users_repo=users_repo, visits_repo=visits_repo)


@pytest.fixture
def app(container):
    flask_app = create_app(settings_module="visitor_register.config.testing", container=container)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
