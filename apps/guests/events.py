"""Guest domain events."""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class GuestCreated(DomainEvent):
    """Event: a guest was created while resolving a booking's guest profile"""
    guest_id: int
    email: str
