from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DatabaseConnection, DBConfig
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .visits.mysql_visit_repository import MySQLVisitRepository
from .visits.repository import VisitRepository
from .visits.service import VisitService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    visits_repo: VisitRepository

    auth_service: AuthService
    user_service: UserService
    visit_service: VisitService
    report_service: ReportService

    conn: Optional[DatabaseConnection] = None


def build_services(*, users_repo: UserRepository, visits_repo: VisitRepository, conn: Optional[DatabaseConnection] = None) -> Container:
    return Container(
        users_repo=users_repo,
        visits_repo=visits_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        visit_service=VisitService(visits_repo),
        report_service=ReportService(visits_repo, users_repo),
        conn=conn,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        users_repo=MySQLUserRepository(conn),
        visits_repo=MySQLVisitRepository(conn),
        conn=conn,
    )
