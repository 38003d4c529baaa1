"""Find-or-create and maintenance of guests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.db.models import QuerySet
from django.test import TestCase

from apps.audit.models import AuditLog
from apps.bookings.models import Booking
from apps.bookings.unit_of_work import HotelUnitOfWork
from apps.guests.models import Guest
from apps.guests.services import GuestPatch, GuestProfile, GuestReference, GuestResolver, remove_guest
from apps.rooms.models import Room
from shared.application.message_bus import MessageBus
from shared.domain.exceptions import DomainValidationError, NotFoundError


class GuestResolverTests(TestCase):
    """Covers lookup by id, reuse by email and profile patches."""

    def setUp(self) -> None:
        self.resolver = GuestResolver()
        self.profile = GuestProfile(full_name="Grace Hopper", email=" grace@navy.mil ", phone="+1 555 0199")

    def _run(self, operation):
        with HotelUnitOfWork(bus=MessageBus()) as uow:
            result = operation(uow)
            uow.commit()
        return result

    def test_profile_creates_guest_once(self) -> None:
        first = self._run(lambda uow: self.resolver.resolve(uow, GuestReference(profile=self.profile)))
        second = self._run(lambda uow: self.resolver.resolve(uow, GuestReference(profile=self.profile)))

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(first.email, "grace@navy.mil")
        self.assertEqual(Guest.objects.count(), 1)
        self.assertEqual(AuditLog.objects.filter(entity="Guest", action="CREATE").count(), 1)

    def test_email_inserted_after_lookup_is_reused(self) -> None:
        real_get = QuerySet.get
        rival = {}

        def get_after_rival_insert(queryset, *args, **kwargs):
            if queryset.model is Guest and not rival:
                rival["guest"] = Guest.objects.create(
                    full_name="Grace B. Hopper", email="grace@navy.mil", phone="+1 555 0100"
                )
                raise Guest.DoesNotExist
            return real_get(queryset, *args, **kwargs)

        with mock.patch.object(QuerySet, "get", autospec=True, side_effect=get_after_rival_insert):
            guest = self._run(lambda uow: self.resolver.resolve(uow, GuestReference(profile=self.profile)))

        self.assertEqual(guest.pk, rival["guest"].pk)
        self.assertEqual(Guest.objects.count(), 1)
        self.assertFalse(AuditLog.objects.filter(entity="Guest", action="CREATE").exists())

    def test_email_match_is_case_sensitive(self) -> None:
        self._run(lambda uow: self.resolver.resolve(uow, GuestReference(profile=self.profile)))
        shouting = GuestProfile(full_name="Grace Hopper", email="GRACE@navy.mil", phone="+1 555 0199")

        self._run(lambda uow: self.resolver.resolve(uow, GuestReference(profile=shouting)))

        self.assertEqual(Guest.objects.count(), 2)

    def test_unknown_id_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            self._run(lambda uow: self.resolver.resolve(uow, GuestReference(guest_id=77)))

    def test_reference_needs_exactly_one_form(self) -> None:
        with self.assertRaises(DomainValidationError):
            GuestReference()
        with self.assertRaises(DomainValidationError):
            GuestReference(guest_id=1, profile=self.profile)

    def test_patch_refuses_email_of_another_guest(self) -> None:
        Guest.objects.create(full_name="Alan Turing", email="alan@bletchley.uk", phone="1")
        grace = Guest.objects.create(full_name="Grace Hopper", email="grace@navy.mil", phone="2")

        with self.assertRaises(DomainValidationError):
            self._run(lambda uow: self.resolver.apply_patch(uow, grace, GuestPatch(email="alan@bletchley.uk")))

    def test_patch_reports_changed_fields(self) -> None:
        grace = Guest.objects.create(full_name="Grace Hopper", email="grace@navy.mil", phone="2")

        changed = self._run(
            lambda uow: self.resolver.apply_patch(uow, grace, GuestPatch(phone="2", nationality="US"))
        )

        self.assertEqual(changed, ["nationality"])
        grace.refresh_from_db()
        self.assertEqual(grace.nationality, "US")


class RemoveGuestTests(TestCase):
    def setUp(self) -> None:
        self.guest = Guest.objects.create(full_name="Grace Hopper", email="grace@navy.mil", phone="2")
        self.room = Room.objects.create(room_number="101", capacity=2, price_per_night=Decimal("90.00"))

    def _book(self, status: str) -> Booking:
        return Booking.objects.create(
            room=self.room,
            guest=self.guest,
            check_in_date=date(2024, 6, 1),
            check_out_date=date(2024, 6, 3),
            status=status,
        )

    def _remove(self) -> None:
        with HotelUnitOfWork(bus=MessageBus()) as uow:
            remove_guest(uow, self.guest.pk, actor="manager")
            uow.commit()

    def test_guest_with_active_booking_is_kept(self) -> None:
        self._book("confirmed")

        with self.assertRaises(DomainValidationError):
            self._remove()
        self.assertTrue(Guest.objects.filter(pk=self.guest.pk).exists())

    def test_guest_with_only_past_bookings_is_removed(self) -> None:
        self._book("checked_out")

        self._remove()

        self.assertFalse(Guest.objects.exists())
        self.assertEqual(AuditLog.objects.get(action="DELETE").before["email"], "grace@navy.mil")
