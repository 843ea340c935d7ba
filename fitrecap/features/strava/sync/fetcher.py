"""
Paginated activity fetching.

Walks /athlete/activities page by page until Strava returns a short page.
Handles 429 (backoff and retry the same page) and 401 (refresh the token
and retry the same page).

Known edge case: an athlete whose activity count is an exact multiple of
the page size costs one extra request that returns an empty page.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from fitrecap.features.users import User
from ..client import (
    StravaClient,
    StravaAuthError,
    StravaRateLimitError,
    StravaNotConnectedError,
)
from ..tokens import TokenManager
from .config import SyncConfig

logger = logging.getLogger(__name__)


def backoff_seconds(attempt: int) -> float:
    """Exponential backoff for the n-th retry (0-based), capped."""
    return min(
        SyncConfig.RATE_LIMIT_BACKOFF_BASE_SECONDS * (2 ** attempt),
        SyncConfig.RATE_LIMIT_BACKOFF_MAX_SECONDS,
    )


class ActivityFetcher:
    """
    Fetches a user's complete activity history from Strava.

    Usage:
        fetcher = ActivityFetcher(StravaClient(), TokenManager(db))
        activities = await fetcher.fetch_all_activities(user)
    """

    def __init__(
        self,
        client: StravaClient,
        tokens: TokenManager,
        per_page: int = SyncConfig.ACTIVITIES_PER_PAGE,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.tokens = tokens
        self.per_page = per_page
        self._sleep = sleep

    async def fetch_all_activities(self, user: User) -> list[dict]:
        """
        Fetch every activity of the user, newest first (Strava order).

        Raises:
            StravaNotConnectedError: User has no access token
            StravaAuthError: Token rejected and refresh did not help
            StravaRateLimitError: Still rate limited after all retries
            StravaAPIError: Any other API failure (not retried)
        """
        access_token = await self.tokens.get_access_token(user)
        if not access_token:
            raise StravaNotConnectedError("No Strava access token found")

        activities: list[dict] = []
        page = 1
        refreshed = False

        while True:
            try:
                batch = await self._fetch_page(access_token, page, len(activities))
            except StravaAuthError:
                if refreshed:
                    raise
                new_token = await self.tokens.refresh(user)
                if not new_token:
                    raise
                logger.info(f"Token refreshed mid-sync for user {user.id}, retrying page {page}")
                access_token = new_token
                refreshed = True
                continue

            refreshed = False
            activities.extend(batch)

            if len(batch) < self.per_page:
                break

            logger.info(f"Fetched {len(activities)} activities so far...")
            page += 1

        logger.info(f"Successfully fetched {len(activities)} total activities")
        return activities

    async def _fetch_page(
        self,
        access_token: str,
        page: int,
        fetched_so_far: int
    ) -> list[dict]:
        """One page, retried on 429 up to RATE_LIMIT_MAX_RETRIES times."""
        attempt = 0
        while True:
            try:
                return await self.client.list_activities(
                    access_token, page=page, per_page=self.per_page
                )
            except StravaRateLimitError as e:
                if attempt >= SyncConfig.RATE_LIMIT_MAX_RETRIES:
                    raise StravaRateLimitError(
                        "Rate limit exceeded while fetching activities. "
                        f"Fetched {fetched_so_far} activities so far. "
                        "Please wait a few minutes and try syncing again.",
                        retry_after=e.retry_after,
                        fetched_count=fetched_so_far,
                    ) from e

                wait = _retry_wait(e.retry_after, attempt)
                logger.warning(
                    f"Rate limited (429) on page {page}. "
                    f"Waiting {wait:.0f} seconds before retry..."
                )
                await self._sleep(wait)
                attempt += 1


def _retry_wait(retry_after: Optional[float], attempt: int) -> float:
    if retry_after is not None:
        return retry_after
    return backoff_seconds(attempt)
