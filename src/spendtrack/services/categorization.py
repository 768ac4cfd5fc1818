"""Categorization service.

Resolves a category for a user's transaction description by combining the
user's stored rules with the static fallback table.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.categorization.rules import ClassificationResult, classify, classify_fallback
from spendtrack.core.exceptions import RuleLookupError
from spendtrack.repositories.category_rule import CategoryRuleRepository

logger = logging.getLogger(__name__)


class CategorizationService:
    """Assigns categories to transaction descriptions for a user."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.rule_repo = CategoryRuleRepository(db)

    async def classify(
        self, description: str | None, user_id: UUID, strict: bool = False
    ) -> ClassificationResult:
        """Categorize a description using the user's enabled rules.

        An empty rule set falls through to the static table. A failing rule
        lookup is different: by default it is logged and the static table is
        used so that transaction creation is never blocked; with strict=True
        it raises instead.

        Args:
            description: Free-text transaction description
            user_id: Owner whose rules apply
            strict: Raise RuleLookupError instead of degrading on lookup failure

        Returns:
            ClassificationResult with category and provenance

        Raises:
            RuleLookupError: If strict and the rule lookup fails
        """
        try:
            rules = await self.rule_repo.get_enabled_rules(user_id)
        except Exception as e:
            extra = {"error_code": "CAT_001", "user_id": str(user_id), "error_type": type(e).__name__}
            # A failed SELECT leaves the transaction aborted; the caller still writes on this session.
            await self.db.rollback()
            if strict:
                logger.error("Category rule lookup failed", extra=extra)
                raise RuleLookupError({"user_id": str(user_id)}) from e
            logger.warning("Category rule lookup failed; using fallback table", extra=extra)
            return classify_fallback(description)

        result = classify(description, rules)
        logger.debug(
            "Categorized description",
            extra={"user_id": str(user_id), "category": result.category, "source": result.source},
        )
        return result

    async def categorize(self, description: str | None, user_id: UUID) -> str:
        """Return the category label for a new transaction's description."""
        result = await self.classify(description, user_id)
        return result.category
