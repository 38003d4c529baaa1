"""Repository base bound to one database alias.

Every repository a unit of work hands out is constructed with the alias of
that unit of work's transaction, so all reads and writes made during one
command go through the same connection and the same atomic block.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from django.db import DEFAULT_DB_ALIAS, models, transaction  # type: ignore
from django.db.models import QuerySet  # type: ignore

ModelT = TypeVar("ModelT", bound=models.Model)


def lock_queryset_if_possible(queryset: QuerySet, using: str = DEFAULT_DB_ALIAS) -> QuerySet:
    """Apply select_for_update when inside transaction.atomic().

    Backends without row locks (SQLite) ignore the clause; they serialize
    writers for the whole transaction instead.
    """

    connection = transaction.get_connection(using)
    if not connection.in_atomic_block or not connection.features.has_select_for_update:
        return queryset
    return queryset.select_for_update()


class DjangoRepository(Generic[ModelT]):
    """find-by-id / find-with-filter / save / remove over one model."""

    model: type[ModelT]

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def queryset(self) -> QuerySet:
        return self.model._default_manager.using(self.using)

    def find_by_id(self, pk: Any, *, lock: bool = False) -> ModelT | None:
        queryset = self.queryset().filter(pk=pk)
        if lock:
            queryset = lock_queryset_if_possible(queryset, self.using)
        return queryset.first()

    def find(self, **filters: Any) -> list[ModelT]:
        return list(self.queryset().filter(**filters))

    def exists(self, **filters: Any) -> bool:
        return self.queryset().filter(**filters).exists()

    def save(self, instance: ModelT, *, update_fields: list[str] | None = None) -> ModelT:
        instance.save(using=self.using, update_fields=update_fields)
        return instance

    def remove(self, instance: ModelT) -> None:
        instance.delete(using=self.using)
