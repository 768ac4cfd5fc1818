"""Transaction request/response schemas."""

from datetime import date, datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

TransactionType = Literal["income", "expense"]
RecurrencePattern = Literal["daily", "weekly", "monthly", "yearly"]


class TransactionCreate(BaseModel):
    """Request to create a transaction or a recurring definition."""

    amount: int = Field(gt=0, description="Amount in cents")
    description: str = Field(min_length=1, max_length=500)
    type: TransactionType
    txn_date: date = Field(description="Transaction date (first occurrence for recurring)")
    category: str | None = Field(
        None, max_length=100, description="Category; inferred from the description when omitted"
    )
    notes: str | None = None
    is_recurring: bool = False
    recurring_pattern: RecurrencePattern | None = None
    recurring_end_date: datetime | None = Field(
        None, description="Generation stops once this passes (defaults to one year after txn_date)"
    )


class TransactionUpdate(BaseModel):
    """Partial update of a transaction.

    A blank category re-infers it from the (possibly updated) description.
    recurring_end_date only applies to recurring definitions.
    """

    amount: int | None = Field(None, gt=0, description="Amount in cents")
    description: str | None = Field(None, min_length=1, max_length=500)
    type: TransactionType | None = None
    txn_date: date | None = None
    category: str | None = Field(None, max_length=100)
    notes: str | None = None
    recurring_end_date: datetime | None = None


class TransactionResponse(BaseModel):
    """Transaction data for API responses."""

    id: UUID
    txn_date: date
    description: str
    category: str | None = None
    amount: int = Field(description="Amount in cents")
    type: str
    notes: str | None = None
    is_recurring: bool = False
    recurring_pattern: str | None = None
    recurring_end_date: datetime | None = None
    parent_transaction_id: UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaginationMeta(BaseModel):
    """Pagination metadata."""

    page: int
    limit: int
    total: int
    total_pages: int


class TransactionListResult(BaseModel):
    """List of transactions.

    total counts every matching transaction, not just the returned page.
    """

    transactions: list[TransactionResponse]
    total: int
    pagination: PaginationMeta | None = None


class CategorizeRequest(BaseModel):
    """Request to preview the category for a description."""

    description: str = Field(max_length=500)


class CategorizeResponse(BaseModel):
    """Category a description would receive, with its provenance."""

    category: str
    source: Literal["rule", "fallback", "uncategorized"]
    rule_id: UUID | None = None
    matched_keyword: str | None = None
