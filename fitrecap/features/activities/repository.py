"""
Activity repository.

Data access layer for synced activities.
"""

from datetime import datetime, timedelta

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.shared.repository import BaseRepository
from .models import Activity


class ActivityRepository(BaseRepository[Activity]):
    """Repository for activities."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Activity)

    async def get_strava_ids(self, user_id: str) -> set[int]:
        """Strava IDs already stored for a user."""
        result = await self.db.execute(
            select(Activity.strava_id).where(Activity.user_id == user_id)
        )
        return set(result.scalars().all())

    async def get_user_activities(self, user_id: str) -> list[Activity]:
        """All activities of a user, newest first."""
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .order_by(desc(Activity.start_date))
        )
        return list(result.scalars().all())

    async def get_for_year(self, user_id: str, year: int) -> list[Activity]:
        """
        Activities of a user that started within a calendar year.

        The year is taken in each activity's own timezone. Stored start
        dates are UTC, so the query reaches a day past each end of the
        year and the local year is checked afterwards.

        Args:
            user_id: User's ID
            year: Calendar year

        Returns:
            Activities ordered newest first
        """
        result = await self.db.execute(
            select(Activity)
            .where(Activity.user_id == user_id)
            .where(Activity.start_date >= datetime(year, 1, 1) - timedelta(days=1))
            .where(Activity.start_date < datetime(year + 1, 1, 1) + timedelta(days=1))
            .order_by(desc(Activity.start_date))
        )
        return [a for a in result.scalars().all() if a.local_start.year == year]
