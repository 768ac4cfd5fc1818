"""Transaction repository with recurrence lookups."""
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.models.transaction import Transaction
from spendtrack.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Repository for Transaction model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    def _user_query(
        self,
        user_id: UUID,
        recurring: bool | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Select:
        query = select(Transaction).where(
            Transaction.user_id == user_id, Transaction.deleted_at.is_(None)
        )
        if recurring is not None:
            query = query.where(Transaction.is_recurring == recurring)
        if category:
            query = query.where(Transaction.category == category)
        if start_date:
            query = query.where(Transaction.txn_date >= start_date)
        if end_date:
            query = query.where(Transaction.txn_date <= end_date)
        return query

    async def get_by_user(
        self,
        user_id: UUID,
        recurring: bool | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Transaction]:
        """Get a user's transactions, newest first.

        Args:
            user_id: Owner of the transactions
            recurring: True for recurring definitions only, False to exclude them
            category: Exact category to match
            start_date: Earliest txn_date (inclusive)
            end_date: Latest txn_date (inclusive)
            skip: Offset for pagination
            limit: Page size
        """
        query = self._user_query(user_id, recurring, category, start_date, end_date)
        result = await self.db.execute(
            query.order_by(Transaction.txn_date.desc(), Transaction.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_user(
        self,
        user_id: UUID,
        recurring: bool | None = None,
        category: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> int:
        """Count a user's transactions matching the same filters as get_by_user."""
        query = self._user_query(user_id, recurring, category, start_date, end_date)
        result = await self.db.execute(select(func.count()).select_from(query.subquery()))
        return result.scalar() or 0

    async def get_for_user(self, user_id: UUID, transaction_id: UUID) -> Transaction | None:
        """Get a single live transaction, scoped to its owner."""
        result = await self.db.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
                Transaction.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def get_active_recurring_definitions(self, now: datetime) -> list[Transaction]:
        """Get recurring definitions whose end date is strictly after now."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.is_recurring == True,
                Transaction.recurring_end_date > now,
                Transaction.deleted_at.is_(None),
            )
            .order_by(Transaction.created_at.asc(), Transaction.id.asc())
        )
        return list(result.scalars().all())

    async def get_latest_instance(self, definition_id: UUID) -> Transaction | None:
        """Get the most recently dated instance generated from a definition.

        Soft-deleted instances still count: they were generated, and ignoring
        them would make the next tick regenerate the same date.
        """
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.parent_transaction_id == definition_id)
            .order_by(Transaction.txn_date.desc(), Transaction.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_instances(self, definition_id: UUID) -> list[Transaction]:
        """Get all live instances of a definition, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(
                Transaction.parent_transaction_id == definition_id,
                Transaction.deleted_at.is_(None),
            )
            .order_by(Transaction.txn_date.desc())
        )
        return list(result.scalars().all())
