"""Room administration through RoomService."""

from datetime import date
from decimal import Decimal

import pytest

from apps.audit.models import AuditLog
from apps.bookings.models import Booking
from apps.rooms.models import Room
from apps.rooms.services import RoomChanges, RoomData, RoomService
from shared.domain.exceptions import CapacityExceededError, DomainValidationError, NotFoundError

pytestmark = pytest.mark.django_db


@pytest.fixture
def service():
    return RoomService()


@pytest.fixture
def run(uow_factory):
    def _run(operation):
        with uow_factory() as uow:
            result = operation(uow)
            uow.commit()
        return result

    return _run


def test_create_normalises_number_and_audits(run, service):
    data = RoomData(room_number="  12b ", capacity=2, price_per_night=Decimal("80.00"))

    room = run(lambda uow: service.create(uow, data, actor="manager"))

    assert room.room_number == "12B"
    assert room.is_available
    log = AuditLog.objects.get()
    assert (log.action, log.entity, log.actor) == ("CREATE", "Room", "manager")
    assert log.after["room_number"] == "12B"


def test_create_duplicate_number_is_rejected(run, service, room):
    data = RoomData(room_number="101 ", capacity=1, price_per_night=Decimal("10.00"))

    with pytest.raises(DomainValidationError):
        run(lambda uow: service.create(uow, data))


def test_create_rejects_bad_values(run, service):
    with pytest.raises(DomainValidationError):
        run(lambda uow: service.create(uow, RoomData("5", capacity=0, price_per_night=Decimal("1"))))
    with pytest.raises(DomainValidationError):
        run(lambda uow: service.create(uow, RoomData("5", capacity=1, price_per_night=Decimal("-1"))))


def test_capacity_cannot_drop_below_active_booking(run, service, room, make_booking):
    make_booking(date(2024, 6, 1), date(2024, 6, 3), number_of_guests=2)

    with pytest.raises(CapacityExceededError):
        run(lambda uow: service.update(uow, room.pk, RoomChanges(capacity=1)))

    updated = run(lambda uow: service.update(uow, room.pk, RoomChanges(capacity=3, price_per_night=Decimal("120.00"))))
    assert (updated.capacity, updated.price_per_night) == (3, Decimal("120.00"))


def test_cancelled_booking_does_not_pin_capacity(run, service, room, make_booking):
    make_booking(date(2024, 6, 1), date(2024, 6, 3), number_of_guests=2, status="cancelled")

    assert run(lambda uow: service.update(uow, room.pk, RoomChanges(capacity=1))).capacity == 1


def test_rename_onto_existing_number_is_rejected(run, service, room, make_room):
    make_room(room_number="102")

    with pytest.raises(DomainValidationError):
        run(lambda uow: service.update(uow, room.pk, RoomChanges(room_number="102")))


def test_delete_refused_while_booking_is_active(run, service, room, make_booking):
    make_booking(date(2024, 6, 1), date(2024, 6, 3), status="checked_in")

    with pytest.raises(DomainValidationError):
        run(lambda uow: service.delete(uow, room.pk))
    assert Room.objects.filter(pk=room.pk).exists()


def test_delete_removes_room_and_its_finished_bookings(run, service, room, make_booking):
    make_booking(date(2024, 6, 1), date(2024, 6, 3), status="checked_out")

    run(lambda uow: service.delete(uow, room.pk, actor="manager"))

    assert not Room.objects.exists()
    assert not Booking.objects.exists()
    assert AuditLog.objects.get(action="DELETE").before["room_number"] == "101"


def test_update_or_delete_unknown_room(run, service):
    with pytest.raises(NotFoundError):
        run(lambda uow: service.update(uow, 5000, RoomChanges(capacity=2)))
    with pytest.raises(NotFoundError):
        run(lambda uow: service.delete(uow, 5000))
