"""Booking lifecycle: state machine, pricing and the create/update workflows.

Every operation receives the unit of work of the command it belongs to and
reads and writes only through the repositories that unit of work exposes.
Nothing here commits; the transaction boundary decides that from the
outcome.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable

from django.utils import timezone  # type: ignore

from apps.guests.services import GuestResolver
from apps.rooms.models import Room
from shared.domain.exceptions import (
    CapacityExceededError,
    DomainValidationError,
    ImmutableStateError,
    NotFoundError,
    RoomUnavailableError,
)
from shared.domain.value_objects import Money, nights, validate_currency

from .application.commands import AvailabilityQuery, BookingPatch, CreateBookingCommand
from .availability import RoomAvailability
from .domain import events
from .domain.state_machine import (
    INITIAL_STATUSES,
    BookingStatus,
    PaymentStatus,
    ensure_transition,
    is_terminal,
)
from .models import Booking
from .serializers import BookingSnapshotSerializer

logger = logging.getLogger(__name__)


def snapshot(booking: Booking) -> dict:
    return dict(BookingSnapshotSerializer(booking).data)


class BookingLifecycleManager:
    """Owns booking status changes, pricing and availability decisions."""

    entity = "Booking"

    def __init__(
        self,
        *,
        guest_resolver: GuestResolver | None = None,
        clock: Callable[[], date] = timezone.localdate,
        default_status: str = BookingStatus.CONFIRMED,
        currency: str = "USD",
    ) -> None:
        status = BookingStatus(default_status)
        if status not in INITIAL_STATUSES:
            raise ValueError(f"Bookings cannot start in status {status}")
        validate_currency(currency)
        self.guest_resolver = guest_resolver or GuestResolver()
        self.clock = clock
        self.default_status = status
        self.currency = currency

    # ----- queries -----

    @staticmethod
    def nights(check_in: date | datetime, check_out: date | datetime) -> int:
        return nights(check_in, check_out)

    def price_for(self, room: Room, check_in: date, check_out: date) -> Decimal:
        rate = Money(room.price_per_night, self.currency)
        return (rate * self.nights(check_in, check_out)).quantized()

    def check_availability(self, uow, query: AvailabilityQuery) -> bool:
        return RoomAvailability(uow.bookings).is_available(
            query.room_id,
            query.check_in_date,
            query.check_out_date,
            exclude_booking_id=query.exclude_booking_id,
        )

    # ----- mutations -----

    def create(self, uow, command: CreateBookingCommand, actor: str = "system") -> Booking:
        check_in, check_out = command.check_in_date, command.check_out_date
        self._validate_stay(check_in, check_out)
        if check_in < self.clock():
            raise DomainValidationError(
                "Check-in date cannot be in the past",
                details={"check_in_date": [check_in.isoformat()]},
            )
        if command.number_of_guests < 1:
            raise DomainValidationError(
                "Number of guests must be at least 1",
                details={"number_of_guests": [str(command.number_of_guests)]},
            )

        logger.info(
            f"Creating booking: room {command.room_id}, {check_in} - {check_out}, "
            f"{command.number_of_guests} guests"
        )

        # Held until commit, so the availability answer cannot go stale
        room = uow.rooms.lock_many([command.room_id]).get(command.room_id)
        if room is None:
            raise NotFoundError("Room", command.room_id)
        if room.status != Room.Status.AVAILABLE:
            raise RoomUnavailableError(f"Room {room.room_number} is not available for booking")
        self._ensure_capacity(room, command.number_of_guests)
        self._ensure_free(uow, room, check_in, check_out)

        guest = self.guest_resolver.resolve(uow, command.guest, actor)

        booking = Booking(
            room=room,
            guest=guest,
            check_in_date=check_in,
            check_out_date=check_out,
            number_of_guests=command.number_of_guests,
            total_price=self.price_for(room, check_in, check_out),
            status=self.default_status.value,
            special_requests=command.special_requests or "",
        )
        uow.bookings.save(booking)
        uow.audit.record(uow.audit.Action.CREATE, self.entity, booking.pk, after=snapshot(booking), actor=actor)
        uow.collect_event(events.BookingCreated(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            room_id=room.pk,
            guest_id=guest.pk,
            check_in_date=check_in,
            check_out_date=check_out,
            total_price=booking.total_price,
            status=booking.status,
        ))

        logger.info(
            f"Booking created: #{booking.pk} for {guest.full_name} (Room: {room.room_number}, "
            f"{self.nights(check_in, check_out)} nights, {booking.total_price} {self.currency})"
        )
        return booking

    def update(self, uow, booking_id: int, patch: BookingPatch, actor: str = "system") -> Booking:
        booking = self._get_locked(uow, booking_id)
        if is_terminal(booking.status):
            raise ImmutableStateError(f"Cannot modify a {booking.status} booking")

        before = snapshot(booking)
        values = patch.booking_fields()
        room_id = values.get("room_id", booking.room_id)
        check_in = values.get("check_in_date", booking.check_in_date)
        check_out = values.get("check_out_date", booking.check_out_date)
        room_changed = room_id != booking.room_id
        stay_changed = (
            room_changed
            or check_in != booking.check_in_date
            or check_out != booking.check_out_date
        )

        if stay_changed:
            self._validate_stay(check_in, check_out)
            rooms = uow.rooms.lock_many([booking.room_id, room_id])
            room = rooms.get(room_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            if room_changed and room.status != Room.Status.AVAILABLE:
                raise RoomUnavailableError(f"Room {room.room_number} is not available for booking")
            self._ensure_free(uow, room, check_in, check_out, exclude_booking_id=booking.pk)
        else:
            room = booking.room

        number_of_guests = values.get("number_of_guests", booking.number_of_guests)
        if number_of_guests < 1:
            raise DomainValidationError("Number of guests must be at least 1")
        if room_changed or "number_of_guests" in values:
            self._ensure_capacity(room, number_of_guests)

        changed = []
        if patch.guest is not None:
            guest_fields = self.guest_resolver.apply_patch(uow, booking.guest, patch.guest, actor)
            changed.extend(f"guest.{name}" for name in guest_fields)

        new_values = {
            "room_id": room.pk,
            "check_in_date": check_in,
            "check_out_date": check_out,
            "number_of_guests": number_of_guests,
            "special_requests": values.get("special_requests", booking.special_requests),
        }
        for name, value in new_values.items():
            if getattr(booking, name) != value:
                changed.append(name)
        booking.room = room
        booking.check_in_date = check_in
        booking.check_out_date = check_out
        booking.number_of_guests = number_of_guests
        booking.special_requests = new_values["special_requests"]

        if stay_changed:
            booking.total_price = self.price_for(room, check_in, check_out)

        uow.bookings.save(booking)
        uow.audit.record(
            uow.audit.Action.UPDATE, self.entity, booking.pk,
            before=before, after=snapshot(booking), actor=actor,
        )
        uow.collect_event(events.BookingUpdated(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            room_id=room.pk,
            changed_fields=tuple(changed),
        ))
        logger.info(f"Booking updated: #{booking.pk} fields={changed}")
        return booking

    def confirm(self, uow, booking_id: int, actor: str = "system") -> Booking:
        """pending -> confirmed; the stay starts blocking its dates from here on."""

        booking = self._get_locked(uow, booking_id)
        ensure_transition(booking.status, BookingStatus.CONFIRMED)
        room = uow.rooms.lock_many([booking.room_id])[booking.room_id]
        self._ensure_free(uow, room, booking.check_in_date, booking.check_out_date, exclude_booking_id=booking.pk)

        before = snapshot(booking)
        booking.status = BookingStatus.CONFIRMED.value
        self._save_with_audit(uow, booking, before, actor)
        uow.collect_event(events.BookingConfirmed(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            room_id=booking.room_id,
            guest_id=booking.guest_id,
        ))
        logger.info(f"Booking confirmed: #{booking.pk}")
        return booking

    def cancel(self, uow, booking_id: int, reason: str | None = None, actor: str = "system") -> Booking:
        booking = self._get_locked(uow, booking_id)
        old_status = booking.status
        ensure_transition(old_status, BookingStatus.CANCELLED)

        before = snapshot(booking)
        booking.status = BookingStatus.CANCELLED.value
        booking.append_note("Cancellation reason", reason)
        uow.bookings.save(booking)
        # Cancellation ends the booking, so it is logged as a delete
        uow.audit.record(
            uow.audit.Action.DELETE, self.entity, booking.pk,
            before=before, after=snapshot(booking), actor=actor,
        )
        uow.collect_event(events.BookingCancelled(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            room_id=booking.room_id,
            reason=reason,
            old_status=old_status,
        ))
        logger.info(f"Booking cancelled: #{booking.pk} (was {old_status})")
        return booking

    def check_in(self, uow, booking_id: int, actor: str = "system") -> Booking:
        booking = self._get_locked(uow, booking_id)
        ensure_transition(booking.status, BookingStatus.CHECKED_IN)

        today = self.clock()
        if today != booking.check_in_date:
            logger.warning(
                f"Booking #{booking.pk} checked in on {today}, "
                f"expected check-in date is {booking.check_in_date}"
            )

        before = snapshot(booking)
        booking.status = BookingStatus.CHECKED_IN.value
        self._save_with_audit(uow, booking, before, actor)
        uow.collect_event(events.BookingCheckedIn(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            room_id=booking.room_id,
        ))
        logger.info(f"Booking checked in: #{booking.pk}")
        return booking

    def check_out(self, uow, booking_id: int, notes: str | None = None, actor: str = "system") -> Booking:
        booking = self._get_locked(uow, booking_id)
        ensure_transition(booking.status, BookingStatus.CHECKED_OUT)

        before = snapshot(booking)
        booking.status = BookingStatus.CHECKED_OUT.value
        booking.append_note("Check-out notes", notes)
        self._save_with_audit(uow, booking, before, actor)
        uow.collect_event(events.BookingCheckedOut(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            room_id=booking.room_id,
            guest_id=booking.guest_id,
        ))
        logger.info(f"Booking checked out: #{booking.pk}")
        return booking

    def mark_paid(self, uow, booking_id: int, reason: str | None = None, actor: str = "system") -> Booking:
        return self._set_payment_status(uow, booking_id, PaymentStatus.PAID, reason, actor)

    def mark_failed(self, uow, booking_id: int, reason: str | None = None, actor: str = "system") -> Booking:
        return self._set_payment_status(uow, booking_id, PaymentStatus.FAILED, reason, actor)

    # ----- helpers -----

    def _set_payment_status(self, uow, booking_id, new_status: PaymentStatus, reason, actor) -> Booking:
        """Payment status is independent of the booking status."""

        limit = Booking._meta.get_field("payment_note").max_length
        if reason and len(reason) > limit:
            raise DomainValidationError(
                f"Payment reason cannot exceed {limit} characters",
                details={"reason": [f"{len(reason)} characters"]},
            )

        booking = self._get_locked(uow, booking_id)
        old_status = booking.payment_status
        if old_status == new_status.value:
            logger.info(f"Booking #{booking.pk} payment already {new_status}")
            return booking

        before = snapshot(booking)
        booking.payment_status = new_status.value
        booking.payment_note = reason or ""
        self._save_with_audit(uow, booking, before, actor)
        uow.collect_event(events.BookingPaymentStatusChanged(
            aggregate_id=booking.pk,
            booking_id=booking.pk,
            old_status=old_status,
            new_status=new_status.value,
            reason=reason,
        ))
        logger.info(f"Booking #{booking.pk} payment {old_status} -> {new_status}")
        return booking

    def _save_with_audit(self, uow, booking: Booking, before: dict, actor: str) -> None:
        uow.bookings.save(booking)
        uow.audit.record(
            uow.audit.Action.UPDATE, self.entity, booking.pk,
            before=before, after=snapshot(booking), actor=actor,
        )

    def _get_locked(self, uow, booking_id: int) -> Booking:
        booking = uow.bookings.find_by_id(booking_id, lock=True)
        if booking is None:
            raise NotFoundError(self.entity, booking_id)
        return booking

    def _ensure_free(self, uow, room: Room, check_in: date, check_out: date, exclude_booking_id=None) -> None:
        available = RoomAvailability(uow.bookings).is_available(
            room.pk, check_in, check_out, exclude_booking_id=exclude_booking_id,
        )
        if not available:
            raise RoomUnavailableError(
                f"Room {room.room_number} is not available for the selected dates",
                details={"room_id": room.pk, "check_in_date": check_in, "check_out_date": check_out},
            )

    @staticmethod
    def _ensure_capacity(room: Room, number_of_guests: int) -> None:
        if number_of_guests > room.capacity:
            raise CapacityExceededError(
                f"Room {room.room_number} capacity ({room.capacity}) exceeded by {number_of_guests} guests",
                details={"capacity": room.capacity, "number_of_guests": number_of_guests},
            )

    @staticmethod
    def _validate_stay(check_in: date, check_out: date) -> None:
        if check_in is None or check_out is None:
            raise DomainValidationError("Check-in and check-out dates are required")
        if check_in >= check_out:
            raise DomainValidationError(
                "Check-out date must be after check-in date",
                details={"check_out_date": [check_out.isoformat()]},
            )
