from __future__ import annotations

import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().with_name("schema.sql")


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(_strip_comments(Path(schema_path).read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


_DEMO_USERS = (
    ("admin@casaapoio.com", "admin123", "Administrador Sistema", "ADMIN"),
    ("recepcao@casaapoio.com", "recepcao123", "Maria da Recepção", "RECEPCAO"),
)


def ensure_demo_data(db_config: dict) -> None:
    """Upsert the demo accounts and, on an empty visits table, a few sample visits."""

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)

        ids: dict[str, int] = {}
        for email, password, name, role in _DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET password_hash=%s, name=%s, role=%s WHERE email=%s",
                    (password_hash, name, role, email),
                )
                ids[role] = int(existing["user_id"])
            else:
                cur.execute(
                    "INSERT INTO users (email, password_hash, name, role, created_at) VALUES (%s, %s, %s, %s, %s)",
                    (email, password_hash, name, role, now_local()),
                )
                ids[role] = int(cur.lastrowid)

        cur.execute("SELECT COUNT(*) AS total FROM visits")
        if int(cur.fetchone()["total"]) == 0:
            now = now_local()
            samples = [
                ("João Silva", "123.456.789-00", "CPF", "(11) 99999-1111", "Filho", "Maria Santos Silva",
                 "Trouxe medicamentos para a paciente", now, None, "ACTIVE", ids["RECEPCAO"]),
                ("Ana Oliveira", "987.654.321-00", "CPF", "(11) 98888-2222", "Irmã", "Carlos Oliveira",
                 "Visita de rotina", now - timedelta(hours=2), None, "ACTIVE", ids["ADMIN"]),
                ("Pedro Costa", "45.678.901-X", "RG", "(11) 97777-3333", "Amigo", "Roberto Almeida",
                 "Visita rápida, trouxe frutas", now - timedelta(hours=24), now - timedelta(hours=23),
                 "COMPLETED", ids["RECEPCAO"]),
                ("Mariana Lima", "234.567.890-11", "CPF", "(11) 96666-4444", "Fisioterapeuta", "Antônio Rodrigues",
                 "Sessão de fisioterapia completa", now - timedelta(hours=3), now - timedelta(hours=2),
                 "COMPLETED", ids["ADMIN"]),
            ]
            cur.executemany(
                """
                INSERT INTO visits (
                    visitor_name, document, document_type, phone, relationship, patient_name,
                    notes, check_in, check_out, status, user_id, created_at
                )
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                [row + (row[7],) for row in samples],
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("demo data ready")


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
