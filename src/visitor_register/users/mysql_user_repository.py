from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User, UserVisitCount
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, password_hash, name, role, created_at"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        password_hash=row["password_hash"],
        name=row["name"],
        role=Role(row["role"]),
        created_at=row["created_at"],
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        name: str,
        role: Role,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, password_hash, name, role, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (email, password_hash, name, role.value, created_at),
            )
            return int(cur.lastrowid)

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users")
            return int(fetchone(cur)["total"])

    def list_with_visit_counts(self) -> Sequence[UserVisitCount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT u.user_id, u.email, u.name, u.role, u.created_at, COUNT(v.visit_id) AS visits
                FROM users u
                LEFT JOIN visits v ON v.user_id = u.user_id
                GROUP BY u.user_id, u.email, u.name, u.role, u.created_at
                ORDER BY u.created_at DESC, u.user_id DESC
                """
            )
            return [
                UserVisitCount(
                    user_id=int(r["user_id"]),
                    email=r["email"],
                    name=r["name"],
                    role=Role(r["role"]),
                    created_at=r["created_at"],
                    visits=int(r["visits"] or 0),
                )
                for r in fetchall(cur)
            ]
