"""Commit/rollback decisions of the transaction boundary and unit of work."""

from dataclasses import dataclass
from decimal import Decimal

import pytest

from apps.rooms.models import Room
from shared.application.message_bus import MessageBus
from shared.application.transaction import CommandResult, TransactionBoundary
from shared.application.uow import AbstractUnitOfWork, DjangoUnitOfWork
from shared.domain.base import DomainEvent
from shared.domain.exceptions import NotFoundError


class RecordingUnitOfWork(AbstractUnitOfWork):
    def __init__(self):
        self.calls = []
        self.entered = False
        self.exited = False
        self._committed = False

    def __enter__(self):
        self.entered = True
        return super().__enter__()

    def __exit__(self, *args):
        super().__exit__(*args)
        self.exited = True

    @property
    def committed(self):
        return self._committed

    def commit(self):
        self._committed = True
        self.calls.append("commit")

    def rollback(self):
        self.calls.append("rollback")

    def collect_event(self, event):
        self.calls.append(("event", event))


@pytest.fixture
def fake_uow():
    return RecordingUnitOfWork()


def test_success_commits_and_releases(fake_uow):
    result = TransactionBoundary(lambda: fake_uow).run(lambda uow: CommandResult.ok("done", 1))

    assert result.status is True
    assert result.data == 1
    assert fake_uow.calls == ["commit"]
    assert fake_uow.exited


def test_reported_failure_rolls_back_without_exception(fake_uow):
    result = TransactionBoundary(lambda: fake_uow).run(
        lambda uow: CommandResult.failure("nope", "validation")
    )

    assert result.status is False
    assert result.error == "validation"
    assert "commit" not in fake_uow.calls
    assert fake_uow.calls[0] == "rollback"
    assert fake_uow.exited


def test_exception_rolls_back_and_propagates(fake_uow):
    def explode(uow):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        TransactionBoundary(lambda: fake_uow).run(explode)

    assert fake_uow.calls == ["rollback"]
    assert fake_uow.exited


def test_result_from_domain_error_keeps_kind_and_details():
    result = CommandResult.from_error(NotFoundError("Room", 7))

    assert result.status is False
    assert result.error == "not_found"
    assert result.message == "Room with ID 7 not found"


@dataclass(kw_only=True)
class Pinged(DomainEvent):
    note: str


def _room(number):
    return Room(room_number=number, capacity=1, price_per_night=Decimal("10.00"))


@pytest.mark.django_db(transaction=True)
def test_django_unit_of_work_discards_writes_unless_committed():
    with DjangoUnitOfWork() as uow:
        _room("201").save(using=uow.using)

    with DjangoUnitOfWork() as uow:
        _room("202").save(using=uow.using)
        uow.commit()

    assert list(Room.objects.values_list("room_number", flat=True)) == ["202"]


@pytest.mark.django_db(transaction=True)
def test_django_unit_of_work_rolls_back_on_exception():
    with pytest.raises(ValueError):
        with DjangoUnitOfWork() as uow:
            _room("301").save(using=uow.using)
            uow.commit()
            raise ValueError("late failure")

    assert not Room.objects.exists()


@pytest.mark.django_db(transaction=True)
def test_events_are_published_only_after_commit():
    bus = MessageBus()
    received = []
    bus.register_event_handler(Pinged, received.append)

    with DjangoUnitOfWork(bus=bus) as uow:
        uow.collect_event(Pinged(note="rolled back"))
        uow.rollback()

    with DjangoUnitOfWork(bus=bus) as uow:
        uow.collect_event(Pinged(note="kept"))
        uow.commit()
        assert received == []

    assert [event.note for event in received] == ["kept"]


@pytest.mark.django_db(transaction=True)
def test_commit_after_rollback_is_refused():
    with DjangoUnitOfWork() as uow:
        uow.rollback()
        with pytest.raises(RuntimeError):
            uow.commit()
