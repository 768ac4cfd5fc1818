"""User-defined keyword rules for transaction categorization.

Rules are user-scoped. Among a user's enabled rules the highest priority is
evaluated first and the first matching keyword wins.
"""

from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spendtrack.models.base import BaseModel


class CategoryRule(BaseModel):
    """Ordered keyword list mapping descriptions to a category for one user."""

    __tablename__ = "category_rules"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    keywords: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("ix_category_rules_user_id_enabled_priority", "user_id", "enabled", "priority"),
    )

    user: Mapped["User"] = relationship("User", back_populates="category_rules")

    def __repr__(self) -> str:
        return (
            f"<CategoryRule(id={self.id}, user_id={self.user_id}, "
            f"category={self.category}, priority={self.priority}, enabled={self.enabled})>"
        )
