"""Booking repository, including the range-overlap count query."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from django.db.models import Max, Q  # type: ignore

from shared.infrastructure.repository import DjangoRepository, lock_queryset_if_possible

from .domain.state_machine import blocking_values
from .models import Booking


def overlap_filter(check_in: date, check_out: date) -> Q:
    """Half-open [check_in, check_out) overlap: touching endpoints do not overlap."""

    return Q(check_in_date__lt=check_out) & Q(check_out_date__gt=check_in)


class BookingRepository(DjangoRepository[Booking]):
    model = Booking

    def find_by_id(self, pk, *, lock: bool = False) -> Booking | None:  # type: ignore[override]
        queryset = self.queryset().filter(pk=pk)
        if lock:
            queryset = lock_queryset_if_possible(queryset, self.using)
        else:
            queryset = queryset.select_related("room", "guest")
        return queryset.first()

    def count_overlapping(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        *,
        statuses: Iterable[str] | None = None,
        exclude_booking_id: int | None = None,
    ) -> int:
        queryset = self.queryset().filter(
            overlap_filter(check_in, check_out),
            room_id=room_id,
            status__in=list(statuses) if statuses is not None else blocking_values(),
        )
        if exclude_booking_id is not None:
            queryset = queryset.exclude(pk=exclude_booking_id)
        return queryset.count()

    def active_for_room(self, room_id: int) -> bool:
        return self.queryset().filter(room_id=room_id, status__in=blocking_values()).exists()

    def active_for_guest(self, guest_id: int) -> bool:
        return self.queryset().filter(guest_id=guest_id, status__in=blocking_values()).exists()

    def max_active_guest_count(self, room_id: int) -> int:
        result = self.queryset().filter(
            room_id=room_id,
            status__in=blocking_values(),
        ).aggregate(peak=Max("number_of_guests"))
        return result["peak"] or 0

    def in_house_room_ids(self, on_date: date) -> set[int]:
        """Rooms holding a confirmed/checked-in stay that covers ``on_date``."""

        return set(
            self.queryset()
            .filter(
                check_in_date__lte=on_date,
                check_out_date__gt=on_date,
                status__in=blocking_values(),
            )
            .values_list("room_id", flat=True)
        )
