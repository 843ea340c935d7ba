"""
Shared route dependencies.

Authentication itself happens upstream (sign-in pages are a separate
service); it forwards the signed-in user's email in X-User-Email.
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.db.session import get_async_db
from fitrecap.features.strava import StravaClient, StravaOAuth
from fitrecap.features.users import User, UserRepository


async def get_current_user(
    x_user_email: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_async_db)
) -> User:
    """Resolve the signed-in user or fail with 401/404."""
    if not x_user_email:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = await UserRepository(db).get_by_email(x_user_email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_strava_client() -> StravaClient:
    """Strava client bound to the process-wide rate limiter."""
    return StravaClient()


def get_strava_oauth() -> StravaOAuth:
    return StravaOAuth()
