"""Category rule repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.models.category_rule import CategoryRule
from spendtrack.repositories.base import BaseRepository


class CategoryRuleRepository(BaseRepository[CategoryRule]):
    """Repository for CategoryRule model."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, CategoryRule)

    async def get_enabled_rules(self, user_id: UUID) -> list[CategoryRule]:
        """Get a user's enabled rules in evaluation order.

        Ordered by priority (highest first); equal priorities fall back to
        creation order, then id, so the scan order is reproducible.
        """
        result = await self.db.execute(
            select(CategoryRule)
            .where(
                CategoryRule.user_id == user_id,
                CategoryRule.enabled == True,
                CategoryRule.deleted_at.is_(None),
            )
            .order_by(
                CategoryRule.priority.desc(),
                CategoryRule.created_at.asc(),
                CategoryRule.id.asc(),
            )
        )
        return list(result.scalars().all())

    async def get_by_user(self, user_id: UUID) -> list[CategoryRule]:
        """Get all of a user's rules (enabled or not), highest priority first."""
        result = await self.db.execute(
            select(CategoryRule)
            .where(CategoryRule.user_id == user_id, CategoryRule.deleted_at.is_(None))
            .order_by(
                CategoryRule.priority.desc(),
                CategoryRule.created_at.asc(),
                CategoryRule.id.asc(),
            )
        )
        return list(result.scalars().all())

    async def get_for_user(self, user_id: UUID, rule_id: UUID) -> CategoryRule | None:
        """Get a single live rule, scoped to its owner."""
        result = await self.db.execute(
            select(CategoryRule).where(
                CategoryRule.id == rule_id,
                CategoryRule.user_id == user_id,
                CategoryRule.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()
