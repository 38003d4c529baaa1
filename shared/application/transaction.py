"""
Transaction Boundary

Runs exactly one inbound mutating command inside one unit of work and
decides commit or rollback from the command's reported outcome:

- result.status is True  -> commit
- result.status is False -> rollback, even though nothing was raised
- exception              -> rollback and re-raise

The unit of work always leaves its atomic block, whatever the outcome.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional
import logging

from shared.application.uow import AbstractUnitOfWork
from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome envelope returned to the command-routing layer"""
    status: bool
    message: str
    data: Any = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> 'CommandResult':
        return cls(status=True, message=message, data=data)

    @classmethod
    def failure(cls, message: str, error: str, data: Any = None) -> 'CommandResult':
        return cls(status=False, message=message, data=data, error=error)

    @classmethod
    def from_error(cls, exc: DomainError) -> 'CommandResult':
        return cls.failure(exc.message, exc.kind, data=exc.details)


class TransactionBoundary:
    """Commit-on-success wrapper around a unit of work factory"""

    def __init__(self, uow_factory: Callable[[], AbstractUnitOfWork]):
        self.uow_factory = uow_factory

    def run(self, operation: Callable[[AbstractUnitOfWork], CommandResult]) -> CommandResult:
        with self.uow_factory() as uow:
            try:
                result = operation(uow)
            except Exception:
                logger.exception("Command raised, rolling back")
                raise

            if result.status:
                uow.commit()
            else:
                logger.warning(f"Command reported failure ({result.error}): {result.message}")
                uow.rollback()

        return result
