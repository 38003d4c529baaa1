"""Shared pytest fixtures for the booking core."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from functools import partial

import pytest

from apps.bookings.application.command_handlers import BookingCommandHandler
from apps.bookings.services import BookingLifecycleManager
from apps.bookings.unit_of_work import HotelUnitOfWork
from apps.rooms.models import Room
from shared.application.message_bus import MessageBus

TODAY = date(2024, 5, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def bus() -> MessageBus:
    return MessageBus()


@pytest.fixture
def uow_factory(bus):
    return partial(HotelUnitOfWork, bus=bus)


@pytest.fixture
def manager() -> BookingLifecycleManager:
    return BookingLifecycleManager(clock=lambda: TODAY)


@pytest.fixture
def commands(manager, uow_factory) -> BookingCommandHandler:
    return BookingCommandHandler(manager, uow_factory)


@pytest.fixture
def make_room(db):
    def _make_room(
        room_number: str = "101",
        capacity: int = 2,
        price: str = "100.00",
        status: str = Room.Status.AVAILABLE,
        room_type: str = Room.RoomType.DOUBLE,
    ) -> Room:
        return Room.objects.create(
            room_number=room_number,
            capacity=capacity,
            price_per_night=Decimal(price),
            status=status,
            room_type=room_type,
        )

    return _make_room


@pytest.fixture
def room(make_room) -> Room:
    return make_room()


@pytest.fixture
def guest_data() -> dict:
    return {
        "full_name": "Ada Lovelace",
        "email": "a@x.com",
        "phone": "+44 20 7946 0000",
    }


@pytest.fixture
def create_params(room, guest_data):
    def _params(check_in: str = "2024-06-01", check_out: str = "2024-06-03", **overrides) -> dict:
        params = {
            "room_id": room.pk,
            "check_in_date": check_in,
            "check_out_date": check_out,
            "guest_data": dict(guest_data),
        }
        params.update(overrides)
        return params

    return _params


@pytest.fixture
def guest(db, guest_data):
    from apps.guests.models import Guest

    return Guest.objects.create(**guest_data)


@pytest.fixture
def make_booking(room, guest):
    from apps.bookings.models import Booking

    def _make_booking(
        check_in: date,
        check_out: date,
        status: str = "confirmed",
        **fields,
    ) -> Booking:
        fields.setdefault("room", room)
        fields.setdefault("guest", guest)
        fields.setdefault("total_price", Decimal("0.00"))
        return Booking.objects.create(
            check_in_date=check_in,
            check_out_date=check_out,
            status=status,
            **fields,
        )

    return _make_booking
