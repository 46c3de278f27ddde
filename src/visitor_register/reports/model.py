from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import end_of_day
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import DocumentType, VisitStatus
from ..users.model import UserVisitCount
from ..visits.model import Visit


@dataclass(frozen=True)
class ReportFilter:
    """Every option the visits report understands.

    ``start``/``end`` bound ``created_at``; ``relationship`` is a
    case-insensitive substring; the others are exact matches. ``None`` means
    "no restriction" (or the default window for the dates).
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    status: Optional[VisitStatus] = None
    document_type: Optional[DocumentType] = None
    relationship: Optional[str] = None

    def resolve(self, now: datetime) -> "ReportFilter":
        """Fill the default window and clamp ``end`` to the end of its day."""
        start = self.start or (now - timedelta(days=DEFAULT_REPORT_DAYS))
        end = end_of_day((self.end or now).date())
        relationship = (self.relationship or "").strip() or None
        return replace(self, start=start, end=end, relationship=relationship)

    def to_dict(self) -> dict:
        return {
            "startDate": self.start.isoformat() if self.start else None,
            "endDate": self.end.isoformat() if self.end else None,
            "status": self.status.value if self.status else "all",
            "documentType": self.document_type.value if self.document_type else "all",
            "relationship": self.relationship or "all",
        }


@dataclass
class StatusCounts:
    active: int = 0
    completed: int = 0
    cancelled: int = 0

    def add(self, status: VisitStatus) -> None:
        attr = status.value.lower()
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> dict:
        return {"active": self.active, "completed": self.completed, "cancelled": self.cancelled}


@dataclass
class RelationshipStats:
    count: int = 0
    by_status: StatusCounts = field(default_factory=StatusCounts)

    def to_dict(self) -> dict:
        return {"count": self.count, **self.by_status.to_dict()}


@dataclass(frozen=True)
class DayCount:
    date: str
    count: int

    def to_dict(self) -> dict:
        return {"date": self.date, "count": self.count}


@dataclass(frozen=True)
class VisitStatistics:
    total: int
    by_status: StatusCounts
    by_relationship: dict[str, RelationshipStats]
    by_document_type: dict[str, int]
    visits_by_day: list[DayCount]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "byStatus": self.by_status.to_dict(),
            "byRelationship": {k: v.to_dict() for k, v in self.by_relationship.items()},
            "byDocumentType": dict(self.by_document_type),
        }


@dataclass(frozen=True)
class VisitReport:
    visits: Sequence[Visit]
    statistics: VisitStatistics
    filters: ReportFilter

    def to_dict(self) -> dict:
        period = {
            "startDate": self.filters.start.isoformat() if self.filters.start else None,
            "endDate": self.filters.end.isoformat() if self.filters.end else None,
        }
        return {
            "visits": [v.to_dict() for v in self.visits],
            "statistics": self.statistics.to_dict(),
            "timeline": {
                "visitsByDay": [d.to_dict() for d in self.statistics.visits_by_day],
                "period": period,
            },
            "filters": self.filters.to_dict(),
        }


@dataclass(frozen=True)
class Dashboard:
    total_visits: int
    today_visits: int
    active_visits: int
    total_users: int
    recent_visits: Sequence[Visit]
    popular_relationships: Sequence[tuple[str, int]]

    def to_dict(self) -> dict:
        return {
            "overview": {
                "totalVisits": self.total_visits,
                "todayVisits": self.today_visits,
                "activeVisits": self.active_visits,
                "totalUsers": self.total_users,
            },
            "recentActivity": {"visits": [v.to_dict() for v in self.recent_visits]},
            "popularRelationships": [
                {"relationship": rel, "count": count} for rel, count in self.popular_relationships
            ],
        }


@dataclass(frozen=True)
class UsersReport:
    users: Sequence[UserVisitCount]
    total: int
    admins: int
    receptionists: int
    most_active: Optional[UserVisitCount]

    def to_dict(self) -> dict:
        most_active = None
        if self.most_active is not None:
            most_active = {
                "name": self.most_active.name,
                "email": self.most_active.email,
                "visitsCount": self.most_active.visits,
            }
        return {
            "users": [u.to_dict() for u in self.users],
            "statistics": {
                "total": self.total,
                "byRole": {"admin": self.admins, "recepcao": self.receptionists},
                "mostActiveUser": most_active,
            },
        }
