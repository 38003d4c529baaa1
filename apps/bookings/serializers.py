"""Serializers for the booking domain.

Input serializers validate one inbound operation each and turn the
validated payload into the explicit command structures the lifecycle
manager accepts. Output serializers render bookings for results and
audit snapshots.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.guests.serializers import GuestPatchSerializer, GuestProfileSerializer
from apps.guests.services import GuestPatch, GuestProfile, GuestReference

from .application.commands import AvailabilityQuery, BookingPatch, CreateBookingCommand
from .models import Booking


def _validate_stay(check_in, check_out) -> None:
    if check_in is not None and check_out is not None and check_in >= check_out:
        raise serializers.ValidationError(
            {"check_out_date": ["Check-out date must be after check-in date."]}
        )


class BookingSnapshotSerializer(serializers.ModelSerializer):
    """Flat before/after state stored in the audit log."""

    class Meta:
        model = Booking
        fields = [
            "id",
            "room",
            "guest",
            "check_in_date",
            "check_out_date",
            "number_of_guests",
            "total_price",
            "status",
            "payment_status",
            "payment_note",
            "special_requests",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned to the command caller."""

    room_id = serializers.ReadOnlyField(source="room.id")
    room_number = serializers.ReadOnlyField(source="room.room_number")
    guest_id = serializers.ReadOnlyField(source="guest.id")
    guest_name = serializers.ReadOnlyField(source="guest.full_name")
    guest_email = serializers.ReadOnlyField(source="guest.email")
    nights = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "room_id",
            "room_number",
            "guest_id",
            "guest_name",
            "guest_email",
            "check_in_date",
            "check_out_date",
            "nights",
            "number_of_guests",
            "total_price",
            "status",
            "payment_status",
            "payment_note",
            "special_requests",
            "created_at",
        ]
        read_only_fields = fields

    def get_nights(self, obj: Booking) -> int:
        return len(obj.stay)


class CreateBookingSerializer(serializers.Serializer):
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    room_id = serializers.IntegerField(min_value=1)
    guest_id = serializers.IntegerField(min_value=1, required=False)
    guest_data = GuestProfileSerializer(required=False)
    number_of_guests = serializers.IntegerField(min_value=1, default=1)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        has_id = attrs.get("guest_id") is not None
        has_profile = attrs.get("guest_data") is not None
        if has_id == has_profile:
            raise serializers.ValidationError("Provide either guest_id or guest_data.")
        _validate_stay(attrs["check_in_date"], attrs["check_out_date"])
        return attrs

    def to_command(self) -> CreateBookingCommand:
        data = self.validated_data
        if data.get("guest_data") is not None:
            reference = GuestReference(profile=GuestProfile(**data["guest_data"]))
        else:
            reference = GuestReference(guest_id=data["guest_id"])
        return CreateBookingCommand(
            check_in_date=data["check_in_date"],
            check_out_date=data["check_out_date"],
            room_id=data["room_id"],
            guest=reference,
            number_of_guests=data["number_of_guests"],
            special_requests=data["special_requests"],
        )


class BookingIdSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)


class UpdateBookingSerializer(BookingIdSerializer):
    room_id = serializers.IntegerField(min_value=1, required=False)
    check_in_date = serializers.DateField(required=False)
    check_out_date = serializers.DateField(required=False)
    number_of_guests = serializers.IntegerField(min_value=1, required=False)
    special_requests = serializers.CharField(required=False, allow_blank=True)
    guest_data = GuestPatchSerializer(required=False)

    def validate(self, attrs):  # type: ignore
        if set(attrs) == {"id"}:
            raise serializers.ValidationError("Nothing to update.")
        _validate_stay(attrs.get("check_in_date"), attrs.get("check_out_date"))
        return attrs

    def to_command(self) -> tuple[int, BookingPatch]:
        data = dict(self.validated_data)
        booking_id = data.pop("id")
        guest_data = data.pop("guest_data", None)
        patch = BookingPatch(
            guest=GuestPatch(**guest_data) if guest_data else None,
            **data,
        )
        return booking_id, patch


class CancelBookingSerializer(BookingIdSerializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class CheckOutSerializer(BookingIdSerializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PaymentStatusSerializer(BookingIdSerializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class AvailabilitySerializer(serializers.Serializer):
    room_id = serializers.IntegerField(min_value=1)
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    exclude_booking_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        _validate_stay(attrs["check_in_date"], attrs["check_out_date"])
        return attrs

    def to_command(self) -> AvailabilityQuery:
        return AvailabilityQuery(**self.validated_data)
