"""
Strava webhook (push subscription) handling.

Two entry points:
- verify_subscription: the GET handshake Strava performs when the
  subscription is created
- handle_event: POSTed events; only "activity created" is acted on

Event handling always reports success so Strava does not retry-storm us;
failures are logged only.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.config import settings
from fitrecap.features.activities import ActivityRepository
from fitrecap.features.users import UserRepository
from .client import StravaClient
from .schemas import WebhookEvent
from .sync.mapper import build_activity_record

logger = logging.getLogger(__name__)


class WebhookIngestor:
    """
    Stores activities announced by Strava push events.

    The single-activity fetch goes through the same StravaClient (and so
    the same shared rate limiter) as bulk sync.
    """

    def __init__(
        self,
        db: AsyncSession,
        client: Optional[StravaClient] = None,
        verify_token: Optional[str] = None,
    ):
        self.db = db
        self.client = client or StravaClient()
        self.verify_token = (
            verify_token if verify_token is not None
            else settings.strava_webhook_verify_token
        )
        self.users = UserRepository(db)
        self.activities = ActivityRepository(db)

    def verify_subscription(
        self,
        mode: Optional[str],
        token: Optional[str],
        challenge: Optional[str]
    ) -> Optional[str]:
        """
        Check the subscription handshake.

        Returns:
            The challenge to echo back, or None if the request is forbidden
        """
        if mode == "subscribe" and self.verify_token and token == self.verify_token:
            return challenge
        logger.warning(f"Rejected webhook verification (mode={mode})")
        return None

    async def handle_event(self, payload: dict) -> bool:
        """
        Process one event. Always returns True.

        Stores the activity only if no record with its Strava ID exists,
        so repeated deliveries of the same event are harmless.
        """
        try:
            event = WebhookEvent.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed webhook payload: {e}")
            return True

        if event.object_type != "activity" or event.aspect_type != "create":
            logger.debug(f"Ignoring webhook event {event.object_type}/{event.aspect_type}")
            return True

        if event.owner_id is None or event.object_id is None:
            return True

        user = await self.users.get_by_athlete_id(event.owner_id)
        if not user or not user.strava_access_token:
            logger.info(f"Webhook for unknown or disconnected athlete {event.owner_id}")
            return True

        try:
            data = await self.client.get_activity(user.strava_access_token, event.object_id)
            record = build_activity_record(data, user.id)

            if await self.activities.exists(strava_id=record["strava_id"]):
                logger.debug(f"Activity {record['strava_id']} already stored")
                return True

            await self.activities.create(**record)
            await self.db.commit()
            logger.info(f"Stored activity {record['strava_id']} from webhook for user {user.id}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error fetching activity {event.object_id} from Strava: {e}")

        return True
