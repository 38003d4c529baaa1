"""Best-effort audit recorder.

Each record is written inside its own savepoint on the caller's database
alias. A failing write rolls back only that savepoint, is logged, and never
reaches the command that asked for it.
"""

from __future__ import annotations

import logging
from typing import Any

from django.db import DEFAULT_DB_ALIAS, transaction  # type: ignore

from .models import AuditLog

logger = logging.getLogger(__name__)


class AuditRecorder:
    Action = AuditLog.Action

    def __init__(self, using: str = DEFAULT_DB_ALIAS) -> None:
        self.using = using

    def record(
        self,
        action: str,
        entity: str,
        entity_id: Any,
        before: dict | None = None,
        after: dict | None = None,
        actor: str | None = None,
    ) -> AuditLog | None:
        action = str(action)
        try:
            with transaction.atomic(using=self.using):
                return AuditLog.objects.using(self.using).create(
                    action=action,
                    entity=entity,
                    entity_id=str(entity_id),
                    actor=actor or "system",
                    before=before,
                    after=after,
                )
        except Exception:
            logger.warning(
                f"Audit record {action} {entity}#{entity_id} failed, continuing",
                exc_info=True,
            )
            return None
