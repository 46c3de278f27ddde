"""Visit status state machine.

ACTIVE is the only initial state. COMPLETED and CANCELLED are terminal and
there is no edge between them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.constants import CANCELLATION_MARKER, CANCELLATION_TIMESTAMP_FORMAT, NOTES_DELIMITER
from ..core.enums import VisitStatus
from ..core.exceptions import InvalidStateError

logger = logging.getLogger(__name__)

INITIAL_STATUS = VisitStatus.ACTIVE
TERMINAL_STATUSES = frozenset({VisitStatus.COMPLETED, VisitStatus.CANCELLED})

TRANSITIONS: dict[VisitStatus, frozenset[VisitStatus]] = {
    VisitStatus.ACTIVE: frozenset({VisitStatus.COMPLETED, VisitStatus.CANCELLED}),
    VisitStatus.COMPLETED: frozenset(),
    VisitStatus.CANCELLED: frozenset(),
}

_REFUSAL_MESSAGES = {
    VisitStatus.COMPLETED: "Visitante já fez check-out ou visita foi cancelada",
    VisitStatus.CANCELLED: "Só é possível cancelar visitas ativas",
}


def can_transition(current: VisitStatus, target: VisitStatus) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def ensure_transition(current: VisitStatus, target: VisitStatus) -> None:
    if not can_transition(current, target):
        logger.warning("refused transition %s -> %s", current.value, target.value)
        raise InvalidStateError(_REFUSAL_MESSAGES.get(target, "Transição de estado inválida"))


def cancellation_marker(at: datetime) -> str:
    return CANCELLATION_MARKER.format(timestamp=at.strftime(CANCELLATION_TIMESTAMP_FORMAT))


def append_note(notes: Optional[str], marker: str) -> str:
    """Append ``marker`` to ``notes`` without touching the existing text."""
    if notes:
        return f"{notes}{NOTES_DELIMITER}{marker}"
    return marker
