"""Transaction service: create, update, delete and list a user's transactions."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.config import settings
from spendtrack.core.exceptions import NotFoundError, ValidationError
from spendtrack.models.transaction import Transaction
from spendtrack.recurrence.engine import RECURRENCE_PATTERNS
from spendtrack.repositories.transaction import TransactionRepository
from spendtrack.schemas.transaction import TransactionCreate, TransactionUpdate
from spendtrack.services.categorization import CategorizationService

logger = logging.getLogger(__name__)


class TransactionService:
    """Manages a user's transactions and recurring definitions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.transaction_repo = TransactionRepository(db)
        self.categorization = CategorizationService(db)

    async def create_transaction(self, user_id: UUID, data: TransactionCreate) -> Transaction:
        """Persist a new transaction, inferring its category when not given.

        Recurring definitions must name a pattern. Without an explicit end
        date they stop generating after settings.recurring_default_span_days.

        Raises:
            ValidationError: If a recurring definition has no valid pattern (VAL_002)
        """
        category = (data.category or "").strip()
        if not category:
            category = await self.categorization.categorize(data.description, user_id)

        pattern = None
        end_date = None
        if data.is_recurring:
            if data.recurring_pattern not in RECURRENCE_PATTERNS:
                raise ValidationError("VAL_002", {"recurring_pattern": data.recurring_pattern})
            pattern = data.recurring_pattern
            end_date = data.recurring_end_date or (
                datetime.combine(data.txn_date, time.min, tzinfo=timezone.utc)
                + timedelta(days=settings.recurring_default_span_days)
            )

        transaction = await self.transaction_repo.create(
            Transaction(
                user_id=user_id,
                amount=data.amount,
                description=data.description,
                category=category,
                type=data.type,
                txn_date=data.txn_date,
                notes=data.notes,
                is_recurring=data.is_recurring,
                recurring_pattern=pattern,
                recurring_end_date=end_date,
            )
        )
        logger.info(
            "Transaction created",
            extra={
                "transaction_id": str(transaction.id),
                "user_id": str(user_id),
                "category": category,
                "is_recurring": data.is_recurring,
            },
        )
        return transaction

    async def update_transaction(
        self, user_id: UUID, transaction_id: UUID, data: TransactionUpdate
    ) -> Transaction:
        """Apply a partial update to one of the user's transactions.

        Updating a recurring definition changes future instances only; the
        instances already generated keep their values.

        Raises:
            NotFoundError: If the transaction is missing or owned by another user (API_001)
            ValidationError: If recurring_end_date is set on a non-recurring transaction (VAL_001)
        """
        transaction = await self.transaction_repo.get_for_user(user_id, transaction_id)
        if transaction is None:
            raise NotFoundError("API_001", {"transaction_id": str(transaction_id)})

        changes = data.model_dump(exclude_unset=True)
        # Only notes may be cleared; null elsewhere means "leave unchanged".
        changes = {k: v for k, v in changes.items() if v is not None or k == "notes"}

        if "recurring_end_date" in changes and not transaction.is_recurring:
            raise ValidationError("VAL_001", {"recurring_end_date": "only recurring definitions end"})

        if "category" in changes:
            category = (changes["category"] or "").strip()
            if not category:
                description = changes.get("description", transaction.description)
                category = await self.categorization.categorize(description, user_id)
            changes["category"] = category

        updated = await self.transaction_repo.update(transaction_id, changes)
        logger.info(
            "Transaction updated",
            extra={
                "transaction_id": str(transaction_id),
                "user_id": str(user_id),
                "fields": ",".join(sorted(changes)),
            },
        )
        return updated

    async def delete_transaction(self, user_id: UUID, transaction_id: UUID) -> None:
        """Soft delete one of the user's transactions.

        Deleting a recurring definition stops future generation; its existing
        instances stay as ordinary transactions.

        Raises:
            NotFoundError: If the transaction is missing or owned by another user (API_001)
        """
        transaction = await self.transaction_repo.get_for_user(user_id, transaction_id)
        if transaction is None:
            raise NotFoundError("API_001", {"transaction_id": str(transaction_id)})

        await self.transaction_repo.soft_delete(transaction_id)
        logger.info(
            "Transaction deleted",
            extra={"transaction_id": str(transaction_id), "user_id": str(user_id)},
        )

    async def list_transactions(
        self,
        user_id: UUID,
        recurring: bool | None = None,
        category: str | None = None,
        month: int | None = None,
        year: int | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Transaction], int]:
        """List a user's transactions with the total count of matches.

        Args:
            user_id: Owner of the transactions
            recurring: True for recurring definitions only, False to exclude them
            category: Exact category to match
            month: Calendar month (1-12); must be given together with year
            year: Calendar year; must be given together with month
            skip: Offset for pagination
            limit: Page size

        Raises:
            ValidationError: If only one of month and year is given (VAL_001)
        """
        start_date = end_date = None
        if month is not None or year is not None:
            if month is None or year is None:
                raise ValidationError("VAL_001", {"month": month, "year": year})
            start_date = date(year, month, 1)
            end_date = start_date + relativedelta(months=1, days=-1)

        filters = dict(
            recurring=recurring, category=category, start_date=start_date, end_date=end_date
        )
        transactions = await self.transaction_repo.get_by_user(
            user_id, skip=skip, limit=limit, **filters
        )
        total = await self.transaction_repo.count_by_user(user_id, **filters)
        return transactions, total

    async def list_instances(self, user_id: UUID, definition_id: UUID) -> list[Transaction]:
        """List the instances generated from one of the user's recurring definitions.

        Raises:
            NotFoundError: If the definition does not exist, is not recurring,
                or belongs to another user (API_001)
        """
        definition = await self.transaction_repo.get_for_user(user_id, definition_id)
        if definition is None or not definition.is_recurring:
            raise NotFoundError("API_001", {"transaction_id": str(definition_id)})
        return await self.transaction_repo.get_instances(definition_id)
