"""
Strava integration module.

Usage:
    from fitrecap.features.strava import StravaClient, TokenManager, WebhookIngestor
    from fitrecap.features.strava.sync import StravaSyncService

Components:
- StravaOAuth: OAuth flow (auth URL, code exchange, refresh, deauthorize)
- StravaClient: API client (activities list, detail, streams)
- StravaRateLimiter: Sliding-window limiter shared by all calls
- TokenManager: Stored token access and refresh
- WebhookIngestor: Push subscription handshake and events
"""

from .oauth import StravaOAuth, StravaOAuthError
from .client import (
    StravaClient,
    StravaError,
    StravaAPIError,
    StravaNotFoundError,
    StravaAuthError,
    StravaRateLimitError,
    StravaNotConnectedError,
    StravaRateLimiter,
    rate_limiter,
)
from .tokens import TokenManager
from .schemas import StravaActivityPayload, WebhookEvent, SyncResponse
from .webhook import WebhookIngestor

__all__ = [
    # OAuth
    "StravaOAuth",
    "StravaOAuthError",
    # Client
    "StravaClient",
    "StravaError",
    "StravaAPIError",
    "StravaNotFoundError",
    "StravaAuthError",
    "StravaRateLimitError",
    "StravaNotConnectedError",
    "StravaRateLimiter",
    "rate_limiter",
    # Tokens
    "TokenManager",
    # Schemas
    "StravaActivityPayload",
    "WebhookEvent",
    "SyncResponse",
    # Webhook
    "WebhookIngestor",
]
