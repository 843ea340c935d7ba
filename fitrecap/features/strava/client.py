"""
Strava API client.

Provides methods for interacting with Strava API.
Handles rate limiting, authentication, and error handling.

Strava API Limits:
- 100 requests per 15 minutes
- 1,000 requests per day

We stay under the short-term limit with a sliding window of 90 requests
per 15 minutes and at least one second between requests.
"""

import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Optional

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================

class StravaError(Exception):
    """Base Strava error."""
    pass


class StravaAPIError(StravaError):
    """Strava API error (network, 5xx, unexpected status)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StravaNotFoundError(StravaAPIError):
    """Requested Strava resource does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class StravaAuthError(StravaError):
    """Authentication/authorization error (expired or invalid token)."""
    pass


class StravaRateLimitError(StravaError):
    """
    Rate limit exceeded.

    Attributes:
        retry_after: Seconds Strava asked us to wait, if it said so
        fetched_count: Activities already fetched when we gave up
    """

    def __init__(
        self,
        message: str = "Strava rate limit exceeded",
        retry_after: Optional[float] = None,
        fetched_count: int = 0
    ):
        super().__init__(message)
        self.retry_after = retry_after
        self.fetched_count = fetched_count


class StravaNotConnectedError(StravaError):
    """User has not linked a Strava account."""
    pass


# =============================================================================
# Rate Limiter
# =============================================================================

class StravaRateLimiter:
    """
    In-memory sliding-window rate limiter for Strava API.

    `acquire()` suspends the caller until one more request fits into the
    window, then waits the minimum inter-request delay and records the
    request. It never fails, it only delays.

    Clock and sleep are injectable so tests can run without real time.
    """

    def __init__(
        self,
        limit: int = 90,
        window_seconds: float = 15 * 60,
        min_delay_seconds: float = 1.0,
        safety_margin_seconds: float = 0.1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.min_delay_seconds = min_delay_seconds
        self.safety_margin_seconds = safety_margin_seconds
        self._clock = clock
        self._sleep = sleep
        self._timestamps: deque[float] = deque()
        self._lock = asyncio.Lock()

    def _prune(self, now: float) -> None:
        while self._timestamps and now - self._timestamps[0] >= self.window_seconds:
            self._timestamps.popleft()

    async def acquire(self) -> None:
        """Wait until a request may be sent, then record it."""
        async with self._lock:
            now = self._clock()
            self._prune(now)

            if len(self._timestamps) >= self.limit:
                oldest = self._timestamps[0]
                wait = self.window_seconds - (now - oldest) + self.safety_margin_seconds
                logger.warning(
                    f"Strava rate limit reached ({len(self._timestamps)}/{self.limit}). "
                    f"Waiting {wait:.0f}s..."
                )
                await self._sleep(wait)

            await self._sleep(self.min_delay_seconds)
            self._timestamps.append(self._clock())

    def get_usage(self) -> dict:
        """Get current rate limit usage."""
        self._prune(self._clock())
        return {
            "used": len(self._timestamps),
            "limit": self.limit,
            "window_minutes": self.window_seconds / 60,
        }


# Shared by every Strava call in the process (approximates one app-wide quota)
rate_limiter = StravaRateLimiter()


# =============================================================================
# Strava Client
# =============================================================================

DEFAULT_STREAM_KEYS = (
    "time", "distance", "altitude", "velocity_smooth", "heartrate",
    "cadence", "watts", "temp", "latlng",
)


class StravaClient:
    """
    Async client for Strava API.

    Every request first passes the rate limiter. HTTP status codes are
    translated into the exception hierarchy above.

    Usage:
        client = StravaClient()
        page = await client.list_activities(token, page=1)
        detail = await client.get_activity(token, 123)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        limiter: Optional[StravaRateLimiter] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.limiter = limiter or rate_limiter
        self._http = http_client

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._http is not None:
            return await self._http.request(method, url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, **kwargs)

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ):
        """
        Make an authenticated API request with rate limiting.

        Raises:
            StravaRateLimitError: If Strava answers 429
            StravaAuthError: If authentication fails
            StravaNotFoundError: If the resource does not exist
            StravaAPIError: If API returns any other error
        """
        await self.limiter.acquire()

        try:
            response = await self._send(
                method,
                f"{self.API_URL}{endpoint}",
                headers={"Authorization": f"Bearer {access_token}"},
                params=params
            )
        except httpx.HTTPError as e:
            raise StravaAPIError(f"Request to {endpoint} failed: {e}") from e

        _log_rate_limit_headers(response)

        if response.status_code == 401:
            raise StravaAuthError("Invalid or expired token")
        elif response.status_code == 429:
            raise StravaRateLimitError(
                "Strava rate limit exceeded",
                retry_after=_parse_retry_after(response)
            )
        elif response.status_code == 404:
            raise StravaNotFoundError(f"{endpoint} not found")
        elif response.status_code != 200:
            raise StravaAPIError(
                f"API error: {response.status_code} - {response.text}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise StravaAPIError(f"Invalid JSON from {endpoint}: {e}") from e

    async def list_activities(
        self,
        access_token: str,
        page: int = 1,
        per_page: int = 200
    ) -> list[dict]:
        """
        Get one page of the athlete's activities (newest first).

        Note: Does NOT include GPS data in list response.
        """
        return await self._api_request(
            "GET",
            "/athlete/activities",
            access_token,
            {"page": page, "per_page": min(per_page, 200)}
        )

    async def get_activity(self, access_token: str, activity_id: int) -> dict:
        """Get detailed activity info."""
        return await self._api_request(
            "GET",
            f"/activities/{activity_id}",
            access_token
        )

    async def get_activity_streams(
        self,
        access_token: str,
        activity_id: int,
        keys: tuple[str, ...] = DEFAULT_STREAM_KEYS
    ) -> dict:
        """
        Get time-series streams keyed by type.

        Returns an empty dict when the activity has no streams.
        """
        try:
            return await self._api_request(
                "GET",
                f"/activities/{activity_id}/streams",
                access_token,
                {"keys": ",".join(keys), "key_by_type": "true"}
            )
        except StravaNotFoundError:
            return {}


# =============================================================================
# Helper Functions
# =============================================================================

def _parse_retry_after(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _log_rate_limit_headers(response: httpx.Response) -> None:
    """Warn when Strava reports >80% of the 15-minute quota used."""
    limit_header = response.headers.get("X-RateLimit-Limit")
    usage_header = response.headers.get("X-RateLimit-Usage")
    if not limit_header or not usage_header:
        return
    try:
        limit_15min, limit_daily = (int(v) for v in limit_header.split(",")[:2])
        usage_15min, usage_daily = (int(v) for v in usage_header.split(",")[:2])
    except ValueError:
        return

    if usage_15min > limit_15min * 0.8:
        logger.warning(
            f"Rate limit warning: {usage_15min}/{limit_15min} (15min), "
            f"{usage_daily}/{limit_daily} (daily)"
        )
