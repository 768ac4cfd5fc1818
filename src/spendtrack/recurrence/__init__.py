"""Recurring transaction scheduling."""

from .engine import RECURRENCE_PATTERNS, advance, is_due, next_occurrence

__all__ = ["RECURRENCE_PATTERNS", "advance", "is_due", "next_occurrence"]
