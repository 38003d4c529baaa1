"""
Unit of Work Pattern

Wraps one inbound command in a single database transaction. Every
repository handed out by the unit of work is bound to the transaction's
database alias, so partial writes never become durable when the command
is rolled back. Domain events are published only after commit.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from django.db import DEFAULT_DB_ALIAS, transaction

from shared.application.message_bus import MessageBus, message_bus
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """
    Abstract Unit of Work pattern

    Nothing is committed implicitly: the caller decides with commit() or
    rollback(). Leaving the block without either, or with an exception,
    rolls back.
    """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None or not self.committed:
            self.rollback()

    @property
    @abstractmethod
    def committed(self) -> bool:
        """Whether commit() was requested for this unit of work"""

    @abstractmethod
    def commit(self):
        """Commit the transaction"""

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""

    @abstractmethod
    def collect_event(self, event: DomainEvent):
        """Queue an event to be published after commit"""


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Usage:
        with HotelUnitOfWork() as uow:
            booking = uow.bookings.find_by_id(booking_id, lock=True)
            ...
            uow.bookings.save(booking)
            uow.collect_event(BookingCancelled(...))
            uow.commit()
        # Events are published after the atomic block commits
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS, bus: Optional[MessageBus] = None):
        self.using = using
        self.bus = bus if bus is not None else message_bus
        self._events: List[DomainEvent] = []
        self._transaction = None
        self._committed = False
        self._rolled_back = False

    def __enter__(self):
        """Start database transaction and bind repositories to it"""
        self._events = []
        self._committed = False
        self._rolled_back = False
        self._transaction = transaction.atomic(using=self.using)
        self._transaction.__enter__()
        self.build_repositories()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Decide commit or rollback, then always leave the atomic block"""
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            atomic, self._transaction = self._transaction, None
            if atomic is not None:
                atomic.__exit__(exc_type, exc_val, exc_tb)

    def build_repositories(self):
        """Hook for subclasses: create repositories bound to ``self.using``"""

    @property
    def committed(self) -> bool:
        return self._committed

    def commit(self):
        """
        Mark the transaction for commit and schedule event publishing

        The database commit itself happens when the atomic block exits;
        transaction.on_commit() makes sure events go out only if it succeeds.
        """
        if self._rolled_back:
            raise RuntimeError("Cannot commit a unit of work that was rolled back")
        logger.debug(f"Committing transaction with {len(self._events)} events")

        events = self._events.copy()
        self._events.clear()
        self._committed = True

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self.using)

    def rollback(self):
        """Rollback changes and discard events"""
        if self._rolled_back:
            return
        if self._events:
            logger.warning(f"Rolling back transaction, discarding {len(self._events)} events")
        else:
            logger.debug("Rolling back transaction")
        self._events.clear()
        self._committed = False
        self._rolled_back = True
        if self._transaction is not None:
            transaction.set_rollback(True, using=self.using)

    def collect_event(self, event: DomainEvent):
        self._events.append(event)
        logger.debug(f"Collected {event.__class__.__name__} (aggregate {event.aggregate_id})")

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        logger.info(f"Publishing {len(events)} domain events after commit")
        self.bus.publish_events(events)
