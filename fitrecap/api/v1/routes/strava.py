"""
Strava Routes

Endpoints for Strava integration:
- /strava/connect - Initiate OAuth flow
- /strava/callback - Handle OAuth callback
- /strava/disconnect - Disconnect Strava
- /strava/activities - Full resync (POST) / stored activities (GET)
- /strava/activities/{id} - Detailed activity with streams
- /strava/webhook - Push subscription handshake and events
"""

import logging
import secrets
from datetime import datetime
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.api.deps import get_current_user, get_strava_client, get_strava_oauth
from fitrecap.config import settings
from fitrecap.db.session import AsyncSessionLocal, get_async_db
from fitrecap.features.activities import ActivityListResponse, ActivityRepository
from fitrecap.features.strava import (
    StravaAuthError,
    StravaClient,
    StravaError,
    StravaNotConnectedError,
    StravaNotFoundError,
    StravaOAuth,
    StravaOAuthError,
    StravaRateLimitError,
    SyncResponse,
    TokenManager,
    WebhookIngestor,
)
from fitrecap.features.strava.sync import StravaSyncService
from fitrecap.features.users import User, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory state storage (for CSRF protection)
# In production, use Redis or database
_oauth_states: dict[str, dict] = {}


def _raise_for_strava_error(e: StravaError) -> None:
    """Translate Strava errors into HTTP errors."""
    if isinstance(e, StravaNotConnectedError):
        raise HTTPException(status_code=400, detail="Strava not connected")
    if isinstance(e, StravaAuthError):
        raise HTTPException(status_code=401, detail="Strava token expired")
    if isinstance(e, StravaRateLimitError):
        raise HTTPException(status_code=429, detail=str(e))
    if isinstance(e, StravaNotFoundError):
        raise HTTPException(status_code=404, detail="Activity not found")
    logger.error(f"Strava request failed: {e}")
    raise HTTPException(status_code=502, detail="Failed to fetch Strava data")


def _dashboard_redirect(error: Optional[str] = None) -> RedirectResponse:
    url = settings.dashboard_url
    if error:
        url = f"{url}?{urlencode({'error': error})}"
    return RedirectResponse(url=url)


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/strava/connect")
async def strava_connect(
    user: User = Depends(get_current_user),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """Initiate Strava OAuth flow for the signed-in user."""
    if not settings.strava_client_id:
        raise HTTPException(
            status_code=503,
            detail="Strava integration not configured"
        )

    # Generate state for CSRF protection
    state = secrets.token_urlsafe(32)
    _oauth_states[state] = {
        "user_id": user.id,
        "created_at": datetime.utcnow()
    }

    auth_url = oauth.get_authorization_url(
        redirect_uri=settings.strava_redirect_uri,
        state=state
    )

    logger.info(f"Strava OAuth initiated for user {user.id}")

    return RedirectResponse(url=auth_url)


async def run_user_sync(user_id: str) -> None:
    """Full resync in its own session (used after connecting)."""
    async with AsyncSessionLocal() as db:
        user = await UserRepository(db).get_by_id(user_id)
        if not user:
            return
        try:
            result = await StravaSyncService(db).sync(user)
            logger.info(f"Initial sync for user {user_id}: {result}")
        except StravaError as e:
            logger.error(f"Error syncing activities for user {user_id}: {e}")


@router.get("/strava/callback")
async def strava_callback(
    background_tasks: BackgroundTasks,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """
    Handle Strava OAuth callback.

    Exchanges code for tokens, saves them and starts the first sync in the
    background. Always redirects back to the dashboard.
    """
    if error:
        logger.warning(f"Strava OAuth error: {error}")
        return _dashboard_redirect("strava_connection_failed")

    if not state or state not in _oauth_states:
        logger.warning("Invalid OAuth state")
        return _dashboard_redirect("invalid_state")

    state_data = _oauth_states.pop(state)

    if not code:
        return _dashboard_redirect("no_code")

    user = await UserRepository(db).get_by_id(state_data["user_id"])
    if not user:
        return _dashboard_redirect("connection_failed")

    try:
        token_data = await oauth.exchange_code(code)
    except StravaOAuthError as e:
        logger.error(f"Token exchange failed: {e}")
        return _dashboard_redirect("connection_failed")

    await TokenManager(db, oauth).save_tokens(user, token_data)

    logger.info(
        f"Strava connected: user={user.id}, "
        f"athlete_id={user.strava_athlete_id}"
    )

    background_tasks.add_task(run_user_sync, user.id)

    return _dashboard_redirect()


@router.post("/strava/disconnect")
async def disconnect_strava(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """
    Disconnect Strava account.

    - Revokes access at Strava (best effort)
    - Clears stored tokens; synced activities are kept
    """
    if user.strava_access_token:
        revoked = await oauth.deauthorize(user.strava_access_token)
        if not revoked:
            logger.warning(f"Strava deauthorize failed for user {user.id}")

    await TokenManager(db, oauth).clear_tokens(user)

    logger.info(f"Strava disconnected for user {user.id}")

    return {"status": "disconnected"}


# =============================================================================
# Activities
# =============================================================================

@router.post("/strava/activities", response_model=SyncResponse)
async def sync_activities(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """Fetch every activity from Strava and upsert it locally."""
    if not user.strava_connected:
        raise HTTPException(status_code=400, detail="Strava not connected")

    service = StravaSyncService(db, client=client, tokens=TokenManager(db, oauth))
    try:
        result = await service.sync(user)
    except StravaError as e:
        _raise_for_strava_error(e)

    return SyncResponse(
        synced=result.inserted,
        updated=result.updated,
        total=result.total_fetched,
        failed=result.failed
    )


@router.get("/strava/activities", response_model=ActivityListResponse)
async def list_activities(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db)
):
    """Stored activities of the signed-in user, newest first."""
    activities = await ActivityRepository(db).get_user_activities(user.id)
    return {"activities": activities}


@router.get("/strava/activities/{activity_id}")
async def get_activity_detail(
    activity_id: int,
    user: User = Depends(get_current_user),
    client: StravaClient = Depends(get_strava_client)
):
    """
    Detailed activity and its streams, straight from Strava.

    Streams are fetched on demand and never stored.
    """
    if not user.strava_access_token:
        raise HTTPException(status_code=403, detail="Strava not connected")

    try:
        activity = await client.get_activity(user.strava_access_token, activity_id)
        streams = await client.get_activity_streams(user.strava_access_token, activity_id)
    except StravaError as e:
        _raise_for_strava_error(e)

    return {"activity": activity, "streams": streams}


# =============================================================================
# Webhook
# =============================================================================

@router.get("/strava/webhook")
async def verify_webhook(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client)
):
    """Strava subscription handshake."""
    ingestor = WebhookIngestor(db, client=client)
    challenge = ingestor.verify_subscription(hub_mode, hub_verify_token, hub_challenge)
    if challenge is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    return {"hub.challenge": challenge}


@router.post("/strava/webhook")
async def receive_webhook(
    payload: dict = Body(...),
    db: AsyncSession = Depends(get_async_db),
    client: StravaClient = Depends(get_strava_client)
):
    """Strava event delivery. Always acknowledged."""
    await WebhookIngestor(db, client=client).handle_event(payload)
    return {"success": True}
