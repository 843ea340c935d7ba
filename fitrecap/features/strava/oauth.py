"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens
- Token refresh
- Token revocation (deauthorization)
"""

import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from fitrecap.config import settings

logger = logging.getLogger(__name__)


class StravaOAuthError(Exception):
    """OAuth-related error."""
    pass


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(redirect_uri=settings.strava_redirect_uri)
        tokens = await oauth.exchange_code(code)
        tokens = await oauth.refresh_token(refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"
    DEAUTHORIZE_URL = "https://www.strava.com/oauth/deauthorize"

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None):
        self.client_id = settings.strava_client_id
        self.client_secret = settings.strava_client_secret
        self._http = http_client

    async def _post(self, url: str, **kwargs) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.post(url, **kwargs)

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: str = "activity:read_all"
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Scopes:
        - activity:read - View activities (excluding private)
        - activity:read_all - View all activities (including private)

        The dashboard needs private activities too, so read_all is the default
        and the consent screen is always shown.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": "force"
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def _token_request(self, data: dict, action: str) -> dict:
        try:
            response = await self._post(
                self.TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    **data,
                }
            )
        except httpx.HTTPError as e:
            raise StravaOAuthError(f"{action} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Strava {action.lower()} failed: {response.text}")
            raise StravaOAuthError(f"{action} failed: {response.status_code}")

        return response.json()

    async def exchange_code(self, code: str) -> dict:
        """
        Exchange authorization code for tokens.

        Returns:
            {
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890,
                "athlete": {"id": 123, "firstname": "...", ...}
            }

        Raises:
            StravaOAuthError: If token exchange fails
        """
        return await self._token_request(
            {"code": code, "grant_type": "authorization_code"},
            "Token exchange"
        )

    async def refresh_token(self, refresh_token: str) -> dict:
        """
        Refresh an expired access token.

        Returns:
            {
                "access_token": "...",
                "refresh_token": "...",
                "expires_at": 1234567890
            }

        Raises:
            StravaOAuthError: If token refresh fails
        """
        return await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            "Token refresh"
        )

    async def deauthorize(self, access_token: str) -> bool:
        """
        Revoke Strava access (user disconnect).

        Returns:
            True if deauthorization was successful
        """
        try:
            response = await self._post(
                self.DEAUTHORIZE_URL,
                headers={"Authorization": f"Bearer {access_token}"}
            )
        except httpx.HTTPError as e:
            logger.warning(f"Strava deauthorize failed: {e}")
            return False
        return response.status_code == 200
