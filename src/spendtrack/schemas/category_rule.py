"""Schemas for user category rules."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _clean_keywords(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    keywords = [keyword.strip() for keyword in value if keyword and keyword.strip()]
    if not keywords:
        raise ValueError("at least one non-empty keyword is required")
    return keywords


class CategoryRuleCreate(BaseModel):
    """Request to create a category rule."""

    keywords: list[str] = Field(min_length=1, description="Case-insensitive substrings to match")
    category: str = Field(min_length=1, max_length=100)
    priority: int = Field(0, description="Higher priorities are evaluated first")
    enabled: bool = True

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, value: list[str] | None) -> list[str] | None:
        return _clean_keywords(value)


class CategoryRuleUpdate(BaseModel):
    """Partial update of a category rule."""

    keywords: list[str] | None = None
    category: str | None = Field(None, min_length=1, max_length=100)
    priority: int | None = None
    enabled: bool | None = None

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, value: list[str] | None) -> list[str] | None:
        return _clean_keywords(value)


class CategoryRuleResponse(BaseModel):
    """Category rule response."""

    id: UUID
    keywords: list[str]
    category: str
    priority: int
    enabled: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryRuleListResult(BaseModel):
    """A user's rules in evaluation order."""

    rules: list[CategoryRuleResponse]
