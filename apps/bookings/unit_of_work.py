"""Unit of work used by every booking-core command."""

from shared.application.uow import DjangoUnitOfWork

from apps.audit.recorder import AuditRecorder
from apps.guests.repositories import GuestRepository
from apps.rooms.repositories import RoomRepository

from .repositories import BookingRepository


class HotelUnitOfWork(DjangoUnitOfWork):
    """Hands out room, guest, booking and audit access bound to one transaction"""

    def build_repositories(self):
        self.rooms = RoomRepository(using=self.using)
        self.guests = GuestRepository(using=self.using)
        self.bookings = BookingRepository(using=self.using)
        self.audit = AuditRecorder(using=self.using)
