"""
Domain Errors

Every failure surfaced by the booking core is a DomainError subclass with
a stable ``kind`` so callers can tell "not found" from "conflict" from
"invalid input" without matching on messages.
"""

from typing import Any


class DomainError(Exception):
    """Base class for typed domain failures"""

    kind = 'domain_error'

    def __init__(self, message: str, *, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        return self.message


class DomainValidationError(DomainError):
    """Malformed or missing input, bad date ordering"""

    kind = 'validation'


class NotFoundError(DomainError):
    """A room, guest or booking id does not resolve"""

    kind = 'not_found'

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class RoomUnavailableError(DomainError):
    """Overlapping stay or room not in available status"""

    kind = 'room_unavailable'


class CapacityExceededError(DomainError):
    """More guests than the room holds"""

    kind = 'capacity_exceeded'


class InvalidTransitionError(DomainError):
    """Booking status change not allowed by the state machine"""

    kind = 'invalid_transition'

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move booking from {current} to {target}")
        self.current = current
        self.target = target


class ImmutableStateError(DomainError):
    """Mutation attempted on a terminal booking"""

    kind = 'immutable_state'
