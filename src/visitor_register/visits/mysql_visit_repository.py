from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import NOTES_DELIMITER
from ..core.enums import DocumentType, VisitStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..reports.model import ReportFilter
from .model import NewVisit, Visit, VisitOwner
from .repository import VisitRepository

_SELECT_VISITS = """
    SELECT v.visit_id, v.visitor_name, v.document, v.document_type, v.phone,
           v.relationship, v.patient_name, v.notes, v.check_in, v.check_out,
           v.status, v.user_id, v.created_at,
           u.name AS owner_name, u.email AS owner_email
    FROM visits v
    LEFT JOIN users u ON u.user_id = v.user_id
"""


def _row_to_visit(r: dict) -> Visit:
    owner = None
    if r.get("owner_name") is not None:
        owner = VisitOwner(name=r["owner_name"], email=r.get("owner_email"))

    return Visit(
        visit_id=int(r["visit_id"]),
        visitor_name=r["visitor_name"],
        document=r["document"],
        document_type=DocumentType(r["document_type"]),
        relationship=r["relationship"],
        patient_name=r["patient_name"],
        check_in=r["check_in"],
        status=VisitStatus(r["status"]),
        user_id=int(r["user_id"]),
        created_at=r["created_at"],
        phone=r.get("phone"),
        notes=r.get("notes"),
        check_out=r.get("check_out"),
        registered_by=owner,
    )


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MySQLVisitRepository(VisitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, visit: NewVisit) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO visits(
                    visitor_name, document, document_type, phone, relationship, patient_name,
                    notes, check_in, status, user_id, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    visit.visitor_name,
                    visit.document,
                    visit.document_type.value,
                    visit.phone,
                    visit.relationship,
                    visit.patient_name,
                    visit.notes,
                    visit.check_in,
                    VisitStatus.ACTIVE.value,
                    int(visit.user_id),
                    visit.created_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, visit_id: int) -> Optional[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_VISITS + " WHERE v.visit_id=%s", (int(visit_id),))
            r = fetchone(cur)
            return _row_to_visit(r) if r else None

    def complete_if_active(self, *, visit_id: int, check_out: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE visits
                SET check_out=%s, status=%s
                WHERE visit_id=%s AND status=%s
                """,
                (check_out, VisitStatus.COMPLETED.value, int(visit_id), VisitStatus.ACTIVE.value),
            )
            return cur.rowcount > 0

    def cancel_if_active(self, *, visit_id: int, marker: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE visits
                SET status=%s,
                    notes=CASE
                        WHEN notes IS NULL OR notes='' THEN %s
                        ELSE CONCAT(notes, %s, %s)
                    END
                WHERE visit_id=%s AND status=%s
                """,
                (
                    VisitStatus.CANCELLED.value,
                    marker,
                    NOTES_DELIMITER,
                    marker,
                    int(visit_id),
                    VisitStatus.ACTIVE.value,
                ),
            )
            return cur.rowcount > 0

    def list_active(self) -> Sequence[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_VISITS + " WHERE v.status=%s ORDER BY v.check_in DESC, v.visit_id DESC",
                (VisitStatus.ACTIVE.value,),
            )
            return [_row_to_visit(r) for r in fetchall(cur)]

    def list_page(self, *, offset: int, limit: int, status: Optional[VisitStatus] = None) -> Sequence[Visit]:
        where = ""
        params: list[object] = []
        if status is not None:
            where = " WHERE v.status=%s"
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_VISITS + where + " ORDER BY v.created_at DESC, v.visit_id DESC LIMIT %s OFFSET %s",
                tuple(params + [int(limit), int(offset)]),
            )
            return [_row_to_visit(r) for r in fetchall(cur)]

    def count(self, *, status: Optional[VisitStatus] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if status is None:
                cur.execute("SELECT COUNT(*) AS total FROM visits")
            else:
                cur.execute("SELECT COUNT(*) AS total FROM visits WHERE status=%s", (status.value,))
            return int(fetchone(cur)["total"])

    def count_created_between(self, *, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM visits WHERE created_at >= %s AND created_at < %s",
                (start, end),
            )
            return int(fetchone(cur)["total"])

    def list_recent(self, *, limit: int) -> Sequence[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_VISITS + " ORDER BY v.created_at DESC, v.visit_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_row_to_visit(r) for r in fetchall(cur)]

    def relationship_counts(self, *, limit: int) -> Sequence[tuple[str, int]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT relationship, COUNT(*) AS total
                FROM visits
                GROUP BY relationship
                ORDER BY total DESC, relationship ASC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [(r["relationship"], int(r["total"])) for r in fetchall(cur)]

    def find_for_report(self, report_filter: ReportFilter) -> Sequence[Visit]:
        clauses = ["v.created_at BETWEEN %s AND %s"]
        params: list[object] = [report_filter.start, report_filter.end]

        if report_filter.status is not None:
            clauses.append("v.status=%s")
            params.append(report_filter.status.value)
        if report_filter.document_type is not None:
            clauses.append("v.document_type=%s")
            params.append(report_filter.document_type.value)
        if report_filter.relationship:
            clauses.append("LOWER(v.relationship) LIKE %s")
            params.append(f"%{_escape_like(report_filter.relationship.lower())}%")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT_VISITS + f" WHERE {where} ORDER BY v.created_at DESC, v.visit_id DESC",
                tuple(params),
            )
            return [_row_to_visit(r) for r in fetchall(cur)]
