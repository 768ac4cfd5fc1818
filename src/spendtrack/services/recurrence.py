"""Recurrence service: one scheduler tick over all active recurring definitions.

Definitions are independent, so a failure on one is recorded and logged and
the tick moves on to the next. A definition whose write failed keeps its old
anchor and is retried on the next tick.
"""

import asyncio
import logging
import weakref
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.config import settings
from spendtrack.core.errors import get_error
from spendtrack.core.exceptions import InstanceWriteError, InvalidRecurrencePatternError
from spendtrack.models.transaction import Transaction
from spendtrack.recurrence.engine import advance
from spendtrack.repositories.transaction import TransactionRepository
from spendtrack.schemas.recurrence import RecurrenceFailure, RecurrenceRunResult

logger = logging.getLogger(__name__)

# One lock per definition: overlapping ticks must not both read the same
# anchor and insert the same occurrence twice. Entries vanish once no tick
# holds or waits on the lock.
_definition_locks: "weakref.WeakValueDictionary[UUID, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(definition_id: UUID) -> asyncio.Lock:
    lock = _definition_locks.get(definition_id)
    if lock is None:
        lock = asyncio.Lock()
        _definition_locks[definition_id] = lock
    return lock


class RecurrenceService:
    """Materializes due instances of recurring transaction definitions."""

    def __init__(self, db: AsyncSession, lookahead: timedelta | None = None):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.lookahead = lookahead or timedelta(hours=settings.recurrence_lookahead_hours)

    async def run_tick(self, now: datetime | None = None) -> RecurrenceRunResult:
        """Process every active recurring definition once.

        Args:
            now: Tick time; defaults to the current UTC time

        Returns:
            RecurrenceRunResult summarizing created instances and failures

        Raises:
            Exception: If the definitions themselves cannot be loaded
        """
        now = now or datetime.now(timezone.utc)
        result = RecurrenceRunResult(ran_at=now)

        try:
            definitions = await self.transaction_repo.get_active_recurring_definitions(now)
        except Exception as e:
            logger.error(
                "Failed to load recurring definitions",
                extra={"error_type": type(e).__name__},
            )
            raise

        # Detach so a rollback after one failed write does not expire the rest.
        for definition in definitions:
            self.db.expunge(definition)

        result.checked = len(definitions)
        for definition in definitions:
            await self._process_definition(definition, now, result)

        logger.info(
            "Recurrence tick complete",
            extra={
                "checked": result.checked,
                "created": len(result.created),
                "not_due": result.not_due,
                "failed": len(result.failures),
            },
        )
        return result

    async def _process_definition(
        self, definition: Transaction, now: datetime, result: RecurrenceRunResult
    ) -> None:
        async with _lock_for(definition.id):
            try:
                latest = await self.transaction_repo.get_latest_instance(definition.id)
                instance = advance(
                    definition,
                    latest.txn_date if latest else None,
                    now,
                    self.lookahead,
                )
                if instance is None:
                    result.not_due += 1
                    return

                created = await self.transaction_repo.create(instance)
                result.created.append(created.id)
                logger.info(
                    "Recurring instance created",
                    extra={
                        "definition_id": str(definition.id),
                        "transaction_id": str(created.id),
                        "txn_date": created.txn_date.isoformat(),
                    },
                )

            except InvalidRecurrencePatternError as e:
                logger.warning(
                    "Skipping recurring definition with unknown pattern",
                    extra={"definition_id": str(definition.id), "error_code": e.error_code},
                )
                result.failures.append(self._failure(definition.id, e.error_code))

            except Exception as e:
                await self.db.rollback()
                error = InstanceWriteError({"definition_id": str(definition.id)})
                logger.error(
                    "Failed to materialize recurring instance",
                    extra={
                        "definition_id": str(definition.id),
                        "error_code": error.error_code,
                        "error_type": type(e).__name__,
                    },
                )
                result.failures.append(self._failure(definition.id, error.error_code))

    @staticmethod
    def _failure(definition_id: UUID, error_code: str) -> RecurrenceFailure:
        return RecurrenceFailure(
            definition_id=definition_id,
            error_code=error_code,
            message=get_error(error_code)["message"],
        )
