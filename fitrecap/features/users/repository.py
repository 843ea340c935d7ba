"""
User repositories.

Data access layer for the User model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.shared.repository import BaseRepository
from .models import User


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def get_by_email(self, email: str) -> User | None:
        """
        Get user by email (case-insensitive).

        Args:
            email: User's email

        Returns:
            User if found, None otherwise
        """
        return await self.get_by(email=email.strip().lower())

    async def get_by_athlete_id(self, athlete_id: int) -> User | None:
        """
        Get user by Strava athlete ID.

        Used by the webhook ingestor to resolve the event owner.
        """
        return await self.get_by(strava_athlete_id=athlete_id)

    async def get_or_create(self, email: str, **kwargs) -> tuple[User, bool]:
        """
        Get existing user or create new one.

        Args:
            email: User's email
            **kwargs: Additional fields for new user

        Returns:
            Tuple of (user, created) where created is True if new user was made
        """
        user = await self.get_by_email(email)
        if user:
            return user, False
        user = await self.create(email=email, **kwargs)
        return user, True

