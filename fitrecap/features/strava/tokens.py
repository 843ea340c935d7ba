"""
Strava token management.

Reads the access token stored on the user and refreshes it through the
OAuth token endpoint when Strava rejects it. Expiry is not checked
before use; a 401 from the API is what triggers a refresh.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.features.users import User
from .oauth import StravaOAuth, StravaOAuthError

logger = logging.getLogger(__name__)


class TokenManager:
    """
    Access/refresh token pair stored on the User row.

    Usage:
        tokens = TokenManager(db)
        token = await tokens.get_access_token(user)
        token = await tokens.refresh(user)  # after a 401
    """

    def __init__(self, db: AsyncSession, oauth: Optional[StravaOAuth] = None):
        self.db = db
        self.oauth = oauth or StravaOAuth()

    async def get_access_token(self, user: User) -> Optional[str]:
        """Currently stored access token, or None if the user has none."""
        return user.strava_access_token or None

    async def refresh(self, user: User) -> Optional[str]:
        """
        Exchange the stored refresh token for a new token pair.

        Returns:
            New access token, or None if no refresh token is stored or
            Strava rejected the exchange.
        """
        if not user.strava_refresh_token:
            return None

        try:
            new_tokens = await self.oauth.refresh_token(user.strava_refresh_token)
        except StravaOAuthError as e:
            logger.error(f"Error refreshing Strava token for user {user.id}: {e}")
            return None

        user.strava_access_token = new_tokens["access_token"]
        user.strava_refresh_token = new_tokens["refresh_token"]
        user.strava_token_expires_at = new_tokens.get("expires_at")
        await self.db.commit()

        logger.info(f"Refreshed Strava token for user {user.id}")
        return user.strava_access_token

    async def save_tokens(self, user: User, token_data: dict) -> User:
        """
        Store tokens from an authorization-code exchange.

        Marks the user as connected and records the athlete ID.
        """
        athlete = token_data.get("athlete") or {}

        user.strava_access_token = token_data["access_token"]
        user.strava_refresh_token = token_data["refresh_token"]
        user.strava_token_expires_at = token_data.get("expires_at")
        user.strava_connected = True
        if athlete.get("id") is not None:
            user.strava_athlete_id = int(athlete["id"])

        await self.db.commit()
        return user

    async def clear_tokens(self, user: User) -> User:
        """Forget the token pair (disconnect). Activities are kept."""
        user.strava_access_token = None
        user.strava_refresh_token = None
        user.strava_token_expires_at = None
        user.strava_connected = False

        await self.db.commit()
        return user
