"""
Statistics Routes

- /statistics - Year statistics bundle for the dashboard
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.api.deps import get_current_user
from fitrecap.db.session import get_async_db
from fitrecap.features.activities import ActivityRepository
from fitrecap.features.statistics import StatisticsResponse, build_statistics
from fitrecap.features.users import User

router = APIRouter()


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    year: Optional[int] = Query(default=None, ge=1970, le=9999),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Statistics for one calendar year (defaults to the current year).

    Recomputed from stored activities on every request.
    """
    if year is None:
        year = datetime.utcnow().year

    activities = await ActivityRepository(db).get_for_year(user.id, year)
    bundle = build_statistics(activities, year)
    return StatisticsResponse.model_validate(bundle)
