"""Guest find-or-create and guest maintenance."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from shared.domain.exceptions import DomainValidationError, NotFoundError

from .events import GuestCreated
from .models import Guest
from .serializers import GuestSnapshotSerializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuestProfile:
    full_name: str
    email: str
    phone: str
    address: str = ""
    id_number: str = ""
    nationality: str = ""

    def __post_init__(self):
        object.__setattr__(self, "email", self.email.strip())


@dataclass(frozen=True)
class GuestReference:
    """Either an existing guest id or a full profile, never both."""

    guest_id: int | None = None
    profile: GuestProfile | None = None

    def __post_init__(self):
        if (self.guest_id is None) == (self.profile is None):
            raise DomainValidationError("Provide either guestId or guestData")


@dataclass(frozen=True)
class GuestPatch:
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    id_number: str | None = None
    nationality: str | None = None

    def provided(self) -> dict:
        values = {field: value for field, value in asdict(self).items() if value is not None}
        if "email" in values:
            values["email"] = values["email"].strip()
        return values


def snapshot(guest: Guest) -> dict:
    return dict(GuestSnapshotSerializer(guest).data)


class GuestResolver:
    """Resolves the guest of a booking inside the caller's unit of work."""

    entity = "Guest"

    def resolve(self, uow, reference: GuestReference, actor: str = "system") -> Guest:
        if reference.guest_id is not None:
            guest = uow.guests.find_by_id(reference.guest_id)
            if guest is None:
                raise NotFoundError(self.entity, reference.guest_id)
            return guest

        fields = asdict(reference.profile)
        email = fields.pop("email")
        guest, created = uow.guests.get_or_create(email, defaults=fields)
        if not created:
            logger.debug(f"Reusing guest {guest.pk} for {email}")
            return guest

        uow.audit.record(uow.audit.Action.CREATE, self.entity, guest.pk, after=snapshot(guest), actor=actor)
        uow.collect_event(GuestCreated(aggregate_id=guest.pk, guest_id=guest.pk, email=guest.email))
        logger.info(f"Guest created: {guest.email} (ID: {guest.pk})")
        return guest

    def apply_patch(self, uow, guest: Guest, patch: GuestPatch, actor: str = "system") -> list[str]:
        """Apply profile changes to ``guest``; returns the changed field names."""

        values = patch.provided()
        if "email" in values and values["email"] != guest.email:
            other = uow.guests.find_by_email(values["email"])
            if other is not None and other.pk != guest.pk:
                raise DomainValidationError(
                    f"Email {values['email']} already belongs to another guest",
                    details={"email": ["duplicate"]},
                )

        changed = [field for field, value in values.items() if getattr(guest, field) != value]
        if not changed:
            return []

        before = snapshot(guest)
        for field in changed:
            setattr(guest, field, values[field])
        uow.guests.save(guest)
        uow.audit.record(
            uow.audit.Action.UPDATE, self.entity, guest.pk,
            before=before, after=snapshot(guest), actor=actor,
        )
        logger.info(f"Guest updated: {guest.email} (ID: {guest.pk}) fields={changed}")
        return changed


def remove_guest(uow, guest_id: int, actor: str = "system") -> None:
    """Delete a guest that holds no confirmed or checked-in booking."""

    guest = uow.guests.find_by_id(guest_id, lock=True)
    if guest is None:
        raise NotFoundError("Guest", guest_id)
    if uow.bookings.active_for_guest(guest.pk):
        raise DomainValidationError(f"Cannot delete guest {guest.email} with active bookings")

    before = snapshot(guest)
    uow.guests.remove(guest)
    uow.audit.record(uow.audit.Action.DELETE, "Guest", guest_id, before=before, actor=actor)
    logger.info(f"Guest deleted: {before['email']} (ID: {guest_id})")
