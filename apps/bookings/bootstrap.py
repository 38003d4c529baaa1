"""Wires the booking core together from settings.

Called once by whatever process hosts the command layer; nothing in the
booking apps builds services at import time.
"""

from __future__ import annotations

from functools import partial

from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore
from django.db import DEFAULT_DB_ALIAS  # type: ignore

from apps.guests.services import GuestResolver
from shared.application.message_bus import MessageBus

from .application.command_handlers import BookingCommandHandler
from .services import BookingLifecycleManager
from .unit_of_work import HotelUnitOfWork


def build_lifecycle_manager(**overrides) -> BookingLifecycleManager:
    options = {
        "guest_resolver": GuestResolver(),
        "default_status": getattr(settings, "BOOKING_DEFAULT_STATUS", "confirmed"),
        "currency": getattr(settings, "BOOKING_CURRENCY", "USD"),
    }
    options.update(overrides)
    try:
        return BookingLifecycleManager(**options)
    except ValueError as exc:
        raise ImproperlyConfigured(f"Invalid booking settings: {exc}") from exc


def build_booking_commands(
    using: str = DEFAULT_DB_ALIAS,
    bus: MessageBus | None = None,
    **manager_overrides,
) -> BookingCommandHandler:
    manager = build_lifecycle_manager(**manager_overrides)
    uow_factory = partial(HotelUnitOfWork, using=using, bus=bus)
    return BookingCommandHandler(manager, uow_factory)
