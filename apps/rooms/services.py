"""Room administration inside a caller-supplied unit of work."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal

from shared.domain.exceptions import CapacityExceededError, DomainValidationError, NotFoundError

from .models import Room, normalize_room_number
from .serializers import RoomSnapshotSerializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomData:
    room_number: str
    capacity: int
    price_per_night: Decimal
    room_type: str = Room.RoomType.STANDARD
    status: str = Room.Status.AVAILABLE
    amenities: str = ""


@dataclass(frozen=True)
class RoomChanges:
    """Partial room update; ``None`` means leave the field as it is."""

    room_number: str | None = None
    capacity: int | None = None
    price_per_night: Decimal | None = None
    room_type: str | None = None
    status: str | None = None
    amenities: str | None = None

    def provided(self) -> dict:
        return {field: value for field, value in asdict(self).items() if value is not None}


def snapshot(room: Room) -> dict:
    return dict(RoomSnapshotSerializer(room).data)


class RoomService:
    """Create, update and delete rooms.

    Every method takes the unit of work first and only touches the
    repositories it exposes, so the caller decides commit or rollback.
    """

    entity = "Room"

    def create(self, uow, data: RoomData, actor: str = "system") -> Room:
        room_number = self._validated_number(data.room_number)
        if uow.rooms.find_by_number(room_number) is not None:
            raise DomainValidationError(f"Room {room_number} already exists")
        self._validate_values(data.capacity, data.price_per_night)

        room = Room(
            room_number=room_number,
            room_type=data.room_type,
            capacity=data.capacity,
            price_per_night=data.price_per_night,
            status=data.status,
            amenities=data.amenities or "",
        )
        uow.rooms.save(room)
        uow.audit.record(uow.audit.Action.CREATE, self.entity, room.pk, after=snapshot(room), actor=actor)
        logger.info(f"Room created: {room.room_number} (ID: {room.pk})")
        return room

    def update(self, uow, room_id: int, changes: RoomChanges, actor: str = "system") -> Room:
        room = self._get_locked(uow, room_id)
        before = snapshot(room)
        values = changes.provided()

        if "room_number" in values:
            values["room_number"] = self._validated_number(values["room_number"])
            existing = uow.rooms.find_by_number(values["room_number"])
            if existing is not None and existing.pk != room.pk:
                raise DomainValidationError(f"Room {values['room_number']} already exists")

        self._validate_values(
            values.get("capacity", room.capacity),
            values.get("price_per_night", room.price_per_night),
        )

        if "capacity" in values:
            peak = uow.bookings.max_active_guest_count(room.pk)
            if values["capacity"] < peak:
                raise CapacityExceededError(
                    f"Room {room.room_number} has an active booking for {peak} guests; "
                    f"capacity cannot drop to {values['capacity']}",
                    details={"capacity": values["capacity"], "active_guests": peak},
                )

        for field, value in values.items():
            setattr(room, field, value)
        uow.rooms.save(room)
        uow.audit.record(
            uow.audit.Action.UPDATE, self.entity, room.pk,
            before=before, after=snapshot(room), actor=actor,
        )
        logger.info(f"Room updated: {room.room_number} (ID: {room.pk})")
        return room

    def delete(self, uow, room_id: int, actor: str = "system") -> None:
        room = self._get_locked(uow, room_id)
        if uow.bookings.active_for_room(room.pk):
            raise DomainValidationError(
                f"Cannot delete room {room.room_number} with active bookings"
            )

        before = snapshot(room)
        # Cancelled and past bookings go with the room
        uow.rooms.remove(room)
        uow.audit.record(uow.audit.Action.DELETE, self.entity, room_id, before=before, actor=actor)
        logger.info(f"Room deleted: {before['room_number']} (ID: {room_id})")

    def _get_locked(self, uow, room_id: int) -> Room:
        room = uow.rooms.find_by_id(room_id, lock=True)
        if room is None:
            raise NotFoundError(self.entity, room_id)
        return room

    @staticmethod
    def _validated_number(value: str) -> str:
        room_number = normalize_room_number(value)
        if not room_number:
            raise DomainValidationError("Room number is required", details={"room_number": ["required"]})
        return room_number

    @staticmethod
    def _validate_values(capacity: int, price_per_night: Decimal) -> None:
        if capacity is None or capacity < 1:
            raise DomainValidationError("Capacity must be at least 1", details={"capacity": [str(capacity)]})
        if price_per_night is None or Decimal(price_per_night) < 0:
            raise DomainValidationError(
                "Price per night cannot be negative",
                details={"price_per_night": [str(price_per_night)]},
            )
