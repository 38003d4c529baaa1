"""
Booking Status Finite State Machine

    pending -> confirmed -> checked_in -> checked_out
    pending | confirmed | checked_in -> cancelled

checked_out and cancelled are terminal. Payment status is tracked
separately and never constrains these transitions.
"""

from enum import Enum

from shared.domain.exceptions import InvalidTransitionError


class BookingStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CHECKED_IN = 'checked_in'
    CHECKED_OUT = 'checked_out'
    CANCELLED = 'cancelled'

    def __str__(self):
        return self.value

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ').title()


class PaymentStatus(str, Enum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'

    def __str__(self):
        return self.value

    @property
    def label(self) -> str:
        return self.value.title()


TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CHECKED_IN, BookingStatus.CANCELLED}),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.CHECKED_OUT, BookingStatus.CANCELLED}),
    BookingStatus.CHECKED_OUT: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)

# Only these statuses hold a room for their dates
BLOCKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN})

# Statuses a new booking may be created in
INITIAL_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


def can_transition(current: str, target: str) -> bool:
    return BookingStatus(target) in TRANSITIONS[BookingStatus(current)]


def ensure_transition(current: str, target: str) -> BookingStatus:
    """Return the target status or raise InvalidTransitionError"""
    if not can_transition(current, target):
        raise InvalidTransitionError(str(current), str(target))
    return BookingStatus(target)


def is_terminal(status: str) -> bool:
    return BookingStatus(status) in TERMINAL_STATUSES


def blocking_values() -> list[str]:
    """Plain string values for ORM ``__in`` lookups"""
    return sorted(status.value for status in BLOCKING_STATUSES)
