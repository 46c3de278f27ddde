from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import VisitStatus
from .model import NewVisit, Visit


class VisitRepository(Protocol):
    """Storage collaborator for visits.

    Terminal transitions must be conditional updates: they apply only while
    the stored status is still ACTIVE and report whether a row changed.
    """

    def create(self, visit: NewVisit) -> int:
        raise NotImplementedError

    def get_by_id(self, visit_id: int) -> Optional[Visit]:
        raise NotImplementedError

    def complete_if_active(self, *, visit_id: int, check_out: datetime) -> bool:
        raise NotImplementedError

    def cancel_if_active(self, *, visit_id: int, marker: str) -> bool:
        """Set CANCELLED and append ``marker`` to the notes (see lifecycle.append_note)."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Visit]:
        """ACTIVE visits ordered by check_in descending."""

        raise NotImplementedError

    def list_page(self, *, offset: int, limit: int, status: Optional[VisitStatus] = None) -> Sequence[Visit]:
        """Visits ordered by created_at descending, then visit_id descending."""

        raise NotImplementedError

    def count(self, *, status: Optional[VisitStatus] = None) -> int:
        raise NotImplementedError

    def count_created_between(self, *, start: datetime, end: datetime) -> int:
        """Visits with start <= created_at < end."""

        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[Visit]:
        raise NotImplementedError

    def relationship_counts(self, *, limit: int) -> Sequence[tuple[str, int]]:
        """Most frequent relationships, highest count first."""

        raise NotImplementedError

    def find_for_report(self, report_filter) -> Sequence[Visit]:
        """Visits matching a resolved ``reports.model.ReportFilter``, created_at descending."""

        raise NotImplementedError
