"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging
from datetime import date

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from apps.rooms.models import Room
from apps.rooms.services import snapshot as room_snapshot

from .unit_of_work import HotelUnitOfWork

logger = logging.getLogger(__name__)

SWEEPER_ACTOR = "occupancy-sweeper"


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.sync_room_occupancy")
def sync_room_occupancy(on_date: str | None = None) -> dict[str, int]:
    """
    Bring room status in line with in-house bookings.

    A room with a confirmed or checked-in booking covering the day
    (check_in_date <= day < check_out_date) becomes OCCUPIED; an OCCUPIED
    room without one goes back to AVAILABLE. MAINTENANCE rooms are left
    alone.

    Returns:
        dict: {"occupied": rooms flipped to occupied, "released": rooms freed}
    """
    day = date.fromisoformat(on_date) if on_date else timezone.localdate()
    occupied = released = 0

    with HotelUnitOfWork() as uow:
        in_house = uow.bookings.in_house_room_ids(day)
        candidate_ids = list(
            uow.rooms.queryset()
            .exclude(status=Room.Status.MAINTENANCE)
            .values_list("pk", flat=True)
        )
        rooms = uow.rooms.lock_many(candidate_ids)

        for room_id, room in rooms.items():
            if room.status == Room.Status.AVAILABLE and room_id in in_house:
                target = Room.Status.OCCUPIED
                occupied += 1
            elif room.status == Room.Status.OCCUPIED and room_id not in in_house:
                target = Room.Status.AVAILABLE
                released += 1
            else:
                continue

            before = room_snapshot(room)
            room.status = target
            uow.rooms.save(room, update_fields=["status", "updated_at"])
            uow.audit.record(
                uow.audit.Action.UPDATE, "Room", room_id,
                before=before, after=room_snapshot(room), actor=SWEEPER_ACTOR,
            )

        uow.commit()

    if occupied or released:
        logger.info(f"Room occupancy synced for {day}: {occupied} occupied, {released} released")
    return {"occupied": occupied, "released": released}
