"""
Booking Commands

Explicit input structures for the booking use cases. Required fields have
no default; optional patch fields default to None, meaning "unchanged".
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Optional

from apps.guests.services import GuestPatch, GuestReference


@dataclass(frozen=True)
class CreateBookingCommand:
    """Command to create a new booking"""
    check_in_date: date
    check_out_date: date
    room_id: int
    guest: GuestReference
    number_of_guests: int = 1
    special_requests: str = ''


@dataclass(frozen=True)
class BookingPatch:
    """Fields an update may change"""
    room_id: Optional[int] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: Optional[int] = None
    special_requests: Optional[str] = None
    guest: Optional[GuestPatch] = field(default=None)

    def booking_fields(self) -> dict:
        values = asdict(self)
        values.pop('guest')
        return {name: value for name, value in values.items() if value is not None}


@dataclass(frozen=True)
class AvailabilityQuery:
    """Read-only availability question"""
    room_id: int
    check_in_date: date
    check_out_date: date
    exclude_booking_id: Optional[int] = None
