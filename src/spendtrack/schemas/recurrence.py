"""Result of a recurrence scheduler tick."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class RecurrenceFailure(BaseModel):
    """A definition whose processing failed during a tick."""

    definition_id: UUID
    error_code: str
    message: str


class RecurrenceRunResult(BaseModel):
    """Summary of one pass over the active recurring definitions."""

    ran_at: datetime
    checked: int = 0
    created: list[UUID] = Field(default_factory=list, description="IDs of instances inserted")
    not_due: int = 0
    failures: list[RecurrenceFailure] = Field(default_factory=list)
