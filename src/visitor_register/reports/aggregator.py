"""Pure aggregation over an already filtered set of visits."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from .model import DayCount, RelationshipStats, StatusCounts, VisitStatistics


def aggregate_visits(visits: Iterable) -> VisitStatistics:
    by_status = StatusCounts()
    by_relationship: dict[str, RelationshipStats] = {}
    by_document_type: Counter[str] = Counter()
    by_day: Counter[str] = Counter()
    total = 0

    for visit in visits:
        total += 1
        by_status.add(visit.status)

        rel = by_relationship.setdefault(visit.relationship, RelationshipStats())
        rel.count += 1
        rel.by_status.add(visit.status)

        by_document_type[visit.document_type.value] += 1
        by_day[visit.created_at.date().isoformat()] += 1

    return VisitStatistics(
        total=total,
        by_status=by_status,
        by_relationship={k: by_relationship[k] for k in sorted(by_relationship)},
        by_document_type={k: by_document_type[k] for k in sorted(by_document_type)},
        visits_by_day=[DayCount(date=d, count=by_day[d]) for d in sorted(by_day)],
    )
