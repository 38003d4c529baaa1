import pytest

from apps.bookings.domain.state_machine import (
    BLOCKING_STATUSES,
    TERMINAL_STATUSES,
    BookingStatus,
    can_transition,
    ensure_transition,
    is_terminal,
)
from shared.domain.exceptions import InvalidTransitionError

ALLOWED = {
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "checked_in"),
    ("confirmed", "cancelled"),
    ("checked_in", "checked_out"),
    ("checked_in", "cancelled"),
}


@pytest.mark.parametrize("current", [status.value for status in BookingStatus])
@pytest.mark.parametrize("target", [status.value for status in BookingStatus])
def test_only_listed_transitions_are_allowed(current, target):
    assert can_transition(current, target) is ((current, target) in ALLOWED)


def test_backward_move_raises_invalid_transition():
    with pytest.raises(InvalidTransitionError) as excinfo:
        ensure_transition("checked_in", "confirmed")

    assert excinfo.value.kind == "invalid_transition"
    assert str(excinfo.value) == "Cannot move booking from checked_in to confirmed"


def test_terminal_and_blocking_sets():
    assert TERMINAL_STATUSES == {BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED}
    assert BLOCKING_STATUSES == {BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN}
    assert is_terminal("cancelled")
    assert not is_terminal("pending")
