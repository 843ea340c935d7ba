"""
Base repository with common CRUD operations.

Provides generic database operations for all feature repositories.
Uses SQLAlchemy async session for non-blocking database access.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, User)

        async def get_by_email(self, email: str) -> User | None:
            return await self.get_by(email=email)
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    def _filtered(self, query, **kwargs):
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        return query

    async def get_by_id(self, id: str | int) -> T | None:
        """Get entity by primary key ID."""
        return await self.db.get(self.model, id)

    async def get_by(self, **kwargs) -> T | None:
        """
        Get single entity by arbitrary field values.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            First matching entity or None
        """
        result = await self.db.execute(self._filtered(select(self.model), **kwargs))
        return result.scalars().first()

    async def exists(self, **kwargs) -> bool:
        """True if at least one entity matches."""
        return await self.count(**kwargs) > 0

    async def create(self, **kwargs) -> T:
        """
        Create new entity.

        Args:
            **kwargs: Field values for new entity

        Returns:
            Created entity with generated ID
        """
        entity = self.model(**kwargs)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def count(self, **kwargs) -> int:
        """Count entities matching criteria."""
        query = self._filtered(select(func.count()).select_from(self.model), **kwargs)
        result = await self.db.execute(query)
        return result.scalar() or 0
