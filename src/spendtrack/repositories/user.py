"""User repository."""
from sqlalchemy.ext.asyncio import AsyncSession

from spendtrack.models.user import User
from spendtrack.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User model (read by the auth dependency)."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)
