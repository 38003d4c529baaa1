"""Guest repository."""

from __future__ import annotations

from shared.infrastructure.repository import DjangoRepository

from .models import Guest


class GuestRepository(DjangoRepository[Guest]):
    model = Guest

    def find_by_email(self, email: str) -> Guest | None:
        return self.queryset().filter(email=email.strip()).first()

    def get_or_create(self, email: str, defaults: dict) -> tuple[Guest, bool]:
        """Insert runs in a savepoint; a concurrent insert of the same email is re-fetched."""

        return self.queryset().get_or_create(email=email.strip(), defaults=defaults)
