"""Database models."""
from spendtrack.models.user import User
from spendtrack.models.category_rule import CategoryRule
from spendtrack.models.transaction import Transaction

__all__ = ["User", "CategoryRule", "Transaction"]
