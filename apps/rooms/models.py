"""Room models for the hotel property."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def normalize_room_number(value: str | None) -> str:
    return (value or "").strip().upper()


class Room(models.Model):
    """Rentable hotel room."""

    class RoomType(models.TextChoices):
        STANDARD = "standard", _("Standard")
        SINGLE = "single", _("Single")
        DOUBLE = "double", _("Double")
        TWIN = "twin", _("Twin")
        SUITE = "suite", _("Suite")
        DELUXE = "deluxe", _("Deluxe")
        FAMILY = "family", _("Family")
        STUDIO = "studio", _("Studio")
        EXECUTIVE = "executive", _("Executive")

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        MAINTENANCE = "maintenance", _("Maintenance")

    room_number = models.CharField(max_length=20, unique=True)
    room_type = models.CharField(
        max_length=20,
        choices=RoomType.choices,
        default=RoomType.STANDARD,
    )
    capacity = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    price_per_night = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
    )
    amenities = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["room_number"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="room_capacity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(price_per_night__gte=0),
                name="room_price_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="room_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Room {self.room_number} ({self.room_type})"

    @property
    def is_available(self) -> bool:
        # Read-only view of status for presentation; never stored.
        return self.status == self.Status.AVAILABLE

    def save(self, *args, **kwargs):  # type: ignore
        self.room_number = normalize_room_number(self.room_number)
        super().save(*args, **kwargs)
