"""Command gateway: envelopes, commit/rollback and post-commit events."""

from __future__ import annotations

from unittest import mock

import pytest

from apps.audit.models import AuditLog
from apps.bookings.domain.events import BookingCancelled, BookingCreated
from apps.bookings.models import Booking
from apps.bookings.repositories import BookingRepository
from apps.guests.events import GuestCreated
from apps.guests.models import Guest
from shared.domain.exceptions import RoomUnavailableError


@pytest.mark.django_db
def test_create_returns_rendered_booking(commands, create_params, room):
    result = commands.handle("create", create_params(), actor="frontdesk")

    assert result.status is True, result.message
    assert result.message == "Booking created"
    assert result.data["status"] == "confirmed"
    assert result.data["total_price"] == "200.00"
    assert result.data["nights"] == 2
    assert result.data["room_number"] == room.room_number
    assert result.data["guest_email"] == "a@x.com"


@pytest.mark.django_db
def test_second_overlapping_create_is_rejected(commands, create_params):
    assert commands.handle("create", create_params()).status

    result = commands.handle("create", create_params("2024-06-02", "2024-06-04"))

    assert result.status is False
    assert result.error == "room_unavailable"
    assert Booking.objects.count() == 1


@pytest.mark.django_db
def test_capacity_failure_persists_nothing(commands, create_params):
    result = commands.handle("create", create_params(number_of_guests=3))

    assert result.error == "capacity_exceeded"
    assert not Booking.objects.exists()
    assert not Guest.objects.exists()
    assert not AuditLog.objects.exists()


@pytest.mark.django_db
def test_invalid_input_is_a_validation_failure(commands, create_params):
    params = create_params()
    del params["guest_data"]

    result = commands.handle("create", params)

    assert result.status is False
    assert result.error == "validation"
    assert "non_field_errors" in result.data


@pytest.mark.django_db
def test_reversed_dates_are_a_validation_failure(commands, create_params):
    result = commands.handle("create", create_params("2024-06-03", "2024-06-01"))

    assert result.error == "validation"
    assert "check_out_date" in result.data


@pytest.mark.django_db
def test_unknown_method(commands):
    result = commands.handle("teleport", {"id": 1})

    assert (result.status, result.error) == (False, "validation")


@pytest.mark.django_db
def test_same_guest_email_twice_reuses_guest(commands, create_params):
    first = commands.handle("create", create_params("2024-06-01", "2024-06-03"))
    second = commands.handle("create", create_params("2024-06-10", "2024-06-12"))

    assert first.data["guest_id"] == second.data["guest_id"]
    assert Guest.objects.count() == 1


@pytest.mark.django_db
def test_full_stay_through_commands(commands, create_params):
    booking_id = commands.handle("create", create_params()).data["id"]

    assert commands.handle("check_in", {"id": booking_id}).data["status"] == "checked_in"
    assert commands.handle("mark_paid", {"id": booking_id, "reason": "Card"}).data["payment_status"] == "paid"
    checked_out = commands.handle("check_out", {"id": booking_id, "notes": "All good"})
    assert checked_out.data["status"] == "checked_out"

    result = commands.handle("update", {"id": booking_id, "special_requests": "late"})
    assert result.error == "immutable_state"


@pytest.mark.django_db
def test_update_through_commands_recomputes_price(commands, create_params):
    booking_id = commands.handle("create", create_params()).data["id"]

    result = commands.handle("update", {"id": booking_id, "check_out_date": "2024-06-04"})

    assert result.status is True
    assert result.data["total_price"] == "300.00"


@pytest.mark.django_db
def test_cancel_twice_is_invalid_transition(commands, create_params):
    booking_id = commands.handle("create", create_params()).data["id"]

    assert commands.handle("cancel", {"id": booking_id, "reason": "No show"}).status
    result = commands.handle("cancel", {"id": booking_id})

    assert result.error == "invalid_transition"


@pytest.mark.django_db
def test_check_availability_command(commands, create_params, room):
    commands.handle("create", create_params())
    query = {"room_id": room.pk, "check_in_date": "2024-06-03", "check_out_date": "2024-06-05"}

    result = commands.handle("check_availability", query)

    assert (result.status, result.data) == (True, True)


@pytest.mark.django_db
def test_missing_booking_is_not_found(commands):
    result = commands.handle("check_in", {"id": 12345})

    assert result.error == "not_found"
    assert result.message == "Booking with ID 12345 not found"


@pytest.mark.django_db
def test_events_published_after_commit(commands, bus, create_params, django_capture_on_commit_callbacks):
    received = []
    for event_type in (BookingCreated, GuestCreated, BookingCancelled):
        bus.register_event_handler(event_type, received.append)

    with django_capture_on_commit_callbacks(execute=True):
        booking_id = commands.handle("create", create_params()).data["id"]
        commands.handle("create", create_params("2024-06-02", "2024-06-04"))
        commands.handle("cancel", {"id": booking_id, "reason": "Changed plans"})

    assert [type(event) for event in received] == [GuestCreated, BookingCreated, BookingCancelled]
    assert received[1].booking_id == booking_id


@pytest.mark.django_db(transaction=True)
def test_failure_after_guest_insert_rolls_everything_back(commands, create_params):
    conflict = RoomUnavailableError("Room 101 is not available for the selected dates")

    with mock.patch.object(BookingRepository, "save", side_effect=conflict):
        result = commands.handle("create", create_params())

    assert result.error == "room_unavailable"
    assert not Guest.objects.exists()
    assert not Booking.objects.exists()
    assert not AuditLog.objects.exists()


@pytest.mark.django_db(transaction=True)
def test_unexpected_error_rolls_back_and_propagates(commands, create_params):
    with mock.patch.object(BookingRepository, "save", side_effect=RuntimeError("disk full")):
        with pytest.raises(RuntimeError):
            commands.handle("create", create_params())

    assert not Guest.objects.exists()
    assert not Booking.objects.exists()
