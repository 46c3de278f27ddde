from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local, start_of_day
from ..core.constants import DASHBOARD_RECENT_LIMIT, DASHBOARD_TOP_RELATIONSHIPS
from ..core.enums import Role, VisitStatus
from ..core.exceptions import ValidationError
from ..core.result import as_result
from ..users.repository import UserRepository
from ..visits.repository import VisitRepository
from .aggregator import aggregate_visits
from .model import Dashboard, ReportFilter, UsersReport, VisitReport


class ReportService:
    def __init__(self, visits: VisitRepository, users: UserRepository):
        self._visits = visits
        self._users = users

    @as_result
    def build_visits_report(self, report_filter: Optional[ReportFilter] = None, *, now: Optional[datetime] = None) -> VisitReport:
        resolved = (report_filter or ReportFilter()).resolve(now or now_local())
        if resolved.start > resolved.end:
            raise ValidationError("Data inicial deve ser anterior à data final")

        visits = list(self._visits.find_for_report(resolved))
        return VisitReport(visits=visits, statistics=aggregate_visits(visits), filters=resolved)

    @as_result
    def dashboard(self, *, now: Optional[datetime] = None) -> Dashboard:
        today = start_of_day((now or now_local()).date())
        return Dashboard(
            total_visits=self._visits.count(),
            today_visits=self._visits.count_created_between(start=today, end=today + timedelta(days=1)),
            active_visits=self._visits.count(status=VisitStatus.ACTIVE),
            total_users=self._users.count(),
            recent_visits=list(self._visits.list_recent(limit=DASHBOARD_RECENT_LIMIT)),
            popular_relationships=list(self._visits.relationship_counts(limit=DASHBOARD_TOP_RELATIONSHIPS)),
        )

    @as_result
    def users_report(self) -> UsersReport:
        users = list(self._users.list_with_visit_counts())
        most_active = None
        for u in users:
            if most_active is None or u.visits > most_active.visits:
                most_active = u

        return UsersReport(
            users=users,
            total=len(users),
            admins=sum(1 for u in users if u.role == Role.ADMIN),
            receptionists=sum(1 for u in users if u.role == Role.RECEPCAO),
            most_active=most_active,
        )
