"""
Booking Command Handlers

Entry point for inbound booking commands. Each command carries a method
name and a parameter mapping; the handler validates the parameters with
the method's serializer, runs the lifecycle operation inside one unit of
work, and returns a CommandResult envelope.

Methods:
- create, update, confirm, cancel, check_in, check_out
- mark_paid, mark_failed
- check_availability (read-only, always rolled back)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

import structlog
from rest_framework import serializers

from shared.application.transaction import CommandResult, TransactionBoundary
from shared.application.validation import validate_input
from shared.domain.exceptions import DomainError
from apps.bookings import serializers as booking_serializers
from apps.bookings.services import BookingLifecycleManager

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Route:
    """One method name: how to validate its input and which operation to run"""
    serializer_class: Type[serializers.Serializer]
    operation: Callable[..., Any]
    message: str
    mutating: bool = True


class BookingCommandHandler:
    """
    Handler for all booking commands

    Domain errors become failure envelopes, so the transaction boundary
    rolls back without an exception. Anything else rolls back and
    propagates to the caller.
    """

    def __init__(self, manager: BookingLifecycleManager, uow_factory: Callable):
        self.manager = manager
        self.uow_factory = uow_factory
        self.boundary = TransactionBoundary(uow_factory)
        self.routes: Dict[str, Route] = {
            'create': Route(booking_serializers.CreateBookingSerializer, self._create, "Booking created"),
            'update': Route(booking_serializers.UpdateBookingSerializer, self._update, "Booking updated"),
            'confirm': Route(booking_serializers.BookingIdSerializer, self._confirm, "Booking confirmed"),
            'cancel': Route(booking_serializers.CancelBookingSerializer, self._cancel, "Booking cancelled"),
            'check_in': Route(booking_serializers.BookingIdSerializer, self._check_in, "Guest checked in"),
            'check_out': Route(booking_serializers.CheckOutSerializer, self._check_out, "Guest checked out"),
            'mark_paid': Route(booking_serializers.PaymentStatusSerializer, self._mark_paid, "Booking marked as paid"),
            'mark_failed': Route(
                booking_serializers.PaymentStatusSerializer, self._mark_failed, "Booking payment marked as failed",
            ),
            'check_availability': Route(
                booking_serializers.AvailabilitySerializer, self._check_availability,
                "Availability checked", mutating=False,
            ),
        }

    def handle(self, method: str, params: Optional[Mapping[str, Any]] = None, actor: str = 'system') -> CommandResult:
        route = self.routes.get(method)
        if route is None:
            logger.warning("booking_command_unknown", method=method, actor=actor)
            return CommandResult.failure(f"Unknown method: {method}", 'validation')

        log = logger.bind(method=method, actor=actor)
        log.info("booking_command_received")

        def operation(uow) -> CommandResult:
            try:
                serializer = validate_input(route.serializer_class, params)
                data = route.operation(uow, serializer, actor)
            except DomainError as exc:
                log.info("booking_command_rejected", error=exc.kind, message=exc.message)
                return CommandResult.from_error(exc)
            return CommandResult.ok(route.message, data)

        if not route.mutating:
            # Never committed; the unit of work rolls back on exit
            with self.uow_factory() as uow:
                return operation(uow)
        return self.boundary.run(operation)

    # ===== Operations =====

    def _render(self, booking) -> dict:
        return dict(booking_serializers.BookingSerializer(booking).data)

    def _create(self, uow, serializer, actor):
        booking = self.manager.create(uow, serializer.to_command(), actor)
        return self._render(booking)

    def _update(self, uow, serializer, actor):
        booking_id, patch = serializer.to_command()
        return self._render(self.manager.update(uow, booking_id, patch, actor))

    def _confirm(self, uow, serializer, actor):
        return self._render(self.manager.confirm(uow, serializer.validated_data['id'], actor))

    def _cancel(self, uow, serializer, actor):
        data = serializer.validated_data
        return self._render(self.manager.cancel(uow, data['id'], data.get('reason'), actor))

    def _check_in(self, uow, serializer, actor):
        return self._render(self.manager.check_in(uow, serializer.validated_data['id'], actor))

    def _check_out(self, uow, serializer, actor):
        data = serializer.validated_data
        return self._render(self.manager.check_out(uow, data['id'], data.get('notes'), actor))

    def _mark_paid(self, uow, serializer, actor):
        data = serializer.validated_data
        return self._render(self.manager.mark_paid(uow, data['id'], data.get('reason'), actor))

    def _mark_failed(self, uow, serializer, actor):
        data = serializer.validated_data
        return self._render(self.manager.mark_failed(uow, data['id'], data.get('reason'), actor))

    def _check_availability(self, uow, serializer, actor):
        return self.manager.check_availability(uow, serializer.to_command())
