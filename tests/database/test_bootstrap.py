from __future__ import annotations

from visitor_register.database.bootstrap import (
    DEFAULT_SCHEMA_PATH,
    _iter_sql_statements,
    _strip_comments,
    _strip_create_db_and_use,
)


def test_schema_ships_inside_the_package():
    assert DEFAULT_SCHEMA_PATH.is_file()
    assert DEFAULT_SCHEMA_PATH.parent.name == "database"
    assert DEFAULT_SCHEMA_PATH.parent.parent.name == "visitor_register"


def test_schema_splits_into_table_statements():
    sql = _strip_create_db_and_use(_strip_comments(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8")))

    statements = list(_iter_sql_statements(sql))

    heads = [s.split("(")[0].strip() for s in statements]
    assert "CREATE TABLE IF NOT EXISTS users" in heads
    assert "CREATE TABLE IF NOT EXISTS visits" in heads
    assert not any(s.upper().startswith(("USE ", "CREATE DATABASE")) for s in statements)


def test_splitter_keeps_semicolons_inside_quotes():
    statements = list(_iter_sql_statements("INSERT INTO t VALUES ('a;b'); SELECT 1;"))

    assert statements == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]
