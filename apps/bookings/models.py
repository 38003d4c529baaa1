"""Booking models for the hotel property."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange

from .domain.state_machine import BookingStatus, PaymentStatus


class Booking(models.Model):
    """Reservation of one room by one guest for a half-open date range."""

    Status = BookingStatus
    PaymentStatus = PaymentStatus

    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    guest = models.ForeignKey(
        "guests.Guest",
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    number_of_guests = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=20,
        choices=[(status.value, status.label) for status in BookingStatus],
        default=BookingStatus.PENDING.value,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=[(status.value, status.label) for status in PaymentStatus],
        default=PaymentStatus.PENDING.value,
    )
    payment_note = models.CharField(max_length=255, blank=True)
    special_requests = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out_date__gt=models.F("check_in_date")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(number_of_guests__gte=1),
                name="booking_guests_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in_date", "check_out_date"], name="booking_room_dates_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} room={self.room_id} {self.check_in_date}..{self.check_out_date}"

    @property
    def stay(self) -> DateRange:
        return DateRange(self.check_in_date, self.check_out_date)

    def append_note(self, label: str, text: str | None) -> None:
        """Append a labelled line to special_requests, keeping what is there."""

        if not text:
            return
        line = f"{label}: {text}"
        self.special_requests = f"{self.special_requests}\n{line}" if self.special_requests else line
