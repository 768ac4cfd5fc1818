"""Transaction model covering one-off transactions, recurring definitions and their instances."""
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import BigInteger, Boolean, Date, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from spendtrack.models.base import BaseModel


class Transaction(BaseModel):
    """Income or expense entry.

    A recurring definition has is_recurring=True. Instances generated from it
    point back through parent_transaction_id. That column is a plain indexed
    UUID, not a foreign key: deleting a definition leaves its instances alone.
    """

    __tablename__ = "transactions"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    txn_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="expense")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recurring_pattern: Mapped[str | None] = mapped_column(String(20), nullable=True)
    recurring_end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    parent_transaction_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    __table_args__ = (
        Index("ix_transactions_parent_transaction_id_txn_date", "parent_transaction_id", "txn_date"),
        Index("ix_transactions_is_recurring_recurring_end_date", "is_recurring", "recurring_end_date"),
    )

    user: Mapped["User"] = relationship("User", back_populates="transactions")

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, txn_date={self.txn_date}, "
            f"category={self.category}, amount={self.amount})>"
        )
