"""Room repository."""

from __future__ import annotations

from shared.infrastructure.repository import DjangoRepository, lock_queryset_if_possible

from .models import Room, normalize_room_number


class RoomRepository(DjangoRepository[Room]):
    model = Room

    def find_by_number(self, room_number: str) -> Room | None:
        return self.queryset().filter(room_number=normalize_room_number(room_number)).first()

    def lock_many(self, room_ids: list[int]) -> dict[int, Room]:
        """Lock rooms in ascending id order so concurrent commands cannot deadlock."""

        ordered_ids = sorted(set(room_ids))
        queryset = lock_queryset_if_possible(
            self.queryset().filter(pk__in=ordered_ids).order_by("pk"),
            self.using,
        )
        return {room.pk: room for room in queryset}
