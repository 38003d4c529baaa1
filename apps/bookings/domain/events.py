"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are published after successful transaction commits; the notification
channel subscribes to them.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created

    Triggers:
    - Send confirmation email to guest
    """
    booking_id: int
    room_id: int
    guest_id: int
    check_in_date: date
    check_out_date: date
    total_price: Decimal
    status: str


@dataclass(kw_only=True)
class BookingUpdated(DomainEvent):
    """Event: Room, dates, guest details or requests of a booking changed"""
    booking_id: int
    room_id: int
    changed_fields: tuple[str, ...]


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """Event: pending -> confirmed"""
    booking_id: int
    room_id: int
    guest_id: int


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    Triggers:
    - Notify guest
    - Free up room dates for new bookings
    """
    booking_id: int
    room_id: int
    reason: Optional[str]
    old_status: str


@dataclass(kw_only=True)
class BookingCheckedIn(DomainEvent):
    """Event: Guest has checked in (confirmed -> checked_in)"""
    booking_id: int
    room_id: int


@dataclass(kw_only=True)
class BookingCheckedOut(DomainEvent):
    """Event: Guest has checked out (checked_in -> checked_out)"""
    booking_id: int
    room_id: int
    guest_id: int


@dataclass(kw_only=True)
class BookingPaymentStatusChanged(DomainEvent):
    """Event: payment marked paid or failed"""
    booking_id: int
    old_status: str
    new_status: str
    reason: Optional[str] = None
