"""Room availability predicate."""

from __future__ import annotations

from datetime import date

from .repositories import BookingRepository


class RoomAvailability:
    """Answers whether a room is free for a half-open date range.

    A room is unavailable when a confirmed or checked-in booking on it,
    other than ``exclude_booking_id``, satisfies
    ``booking.check_in < check_out and booking.check_out > check_in``.
    Touching endpoints do not conflict, so same-day turnover is allowed.

    The query runs on the repository's connection; callers that act on the
    answer must hold the room lock in the same transaction.
    """

    def __init__(self, bookings: BookingRepository) -> None:
        self.bookings = bookings

    def is_available(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_booking_id: int | None = None,
    ) -> bool:
        conflicts = self.bookings.count_overlapping(
            room_id,
            check_in,
            check_out,
            exclude_booking_id=exclude_booking_id,
        )
        return conflicts == 0
