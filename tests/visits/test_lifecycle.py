from datetime import datetime

import pytest

from visitor_register.core.enums import VisitStatus
from visitor_register.core.exceptions import InvalidStateError
from visitor_register.visits.lifecycle import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    append_note,
    can_transition,
    cancellation_marker,
    ensure_transition,
)


def test_active_is_the_only_initial_state():
    assert INITIAL_STATUS == VisitStatus.ACTIVE
    assert VisitStatus.ACTIVE not in TERMINAL_STATUSES


@pytest.mark.parametrize("target", [VisitStatus.COMPLETED, VisitStatus.CANCELLED])
def test_active_can_reach_terminal_states(target):
    assert can_transition(VisitStatus.ACTIVE, target)


@pytest.mark.parametrize("current", [VisitStatus.COMPLETED, VisitStatus.CANCELLED])
def test_terminal_states_never_move(current):
    for target in VisitStatus:
        assert not can_transition(current, target)


def test_ensure_transition_messages():
    with pytest.raises(InvalidStateError, match="já fez check-out"):
        ensure_transition(VisitStatus.CANCELLED, VisitStatus.COMPLETED)
    with pytest.raises(InvalidStateError, match="Só é possível cancelar visitas ativas"):
        ensure_transition(VisitStatus.COMPLETED, VisitStatus.CANCELLED)


def test_append_note_keeps_previous_text():
    marker = cancellation_marker(datetime(2026, 2, 2, 9, 30, 5))

    assert marker == "[CANCELADO: 02/02/2026 09:30:05]"
    assert append_note(None, marker) == marker
    assert append_note("", marker) == marker
    assert append_note("Trouxe frutas", marker) == f"Trouxe frutas | {marker}"
