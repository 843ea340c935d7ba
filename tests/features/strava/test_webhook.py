"""
Tests for the Strava webhook ingestor.
"""

import httpx
import pytest
from sqlalchemy import func, select

from fitrecap.features.activities import Activity
from fitrecap.features.strava import WebhookIngestor
from tests.factories import Recorder, strava_activity


def create_event(activity_id=100, owner_id=42, **overrides):
    event = {
        "object_type": "activity",
        "aspect_type": "create",
        "object_id": activity_id,
        "owner_id": owner_id,
        "event_time": 1710660000,
        "subscription_id": 1,
        "updates": {},
    }
    event.update(overrides)
    return event


def activity_response(request: httpx.Request) -> httpx.Response:
    activity_id = int(request.url.path.rsplit("/", 1)[-1])
    return httpx.Response(200, json=strava_activity(activity_id, name="Lunch Ride", type="Ride"))


async def count_activities(session_factory) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(Activity))


# =============================================================================
# Subscription Handshake
# =============================================================================

class TestVerifySubscription:
    """Tests for the GET handshake."""

    def test_echoes_challenge(self, db):
        ingestor = WebhookIngestor(db, verify_token="secret")
        assert ingestor.verify_subscription("subscribe", "secret", "abc123") == "abc123"

    def test_wrong_token(self, db):
        ingestor = WebhookIngestor(db, verify_token="secret")
        assert ingestor.verify_subscription("subscribe", "guess", "abc123") is None

    def test_wrong_mode(self, db):
        ingestor = WebhookIngestor(db, verify_token="secret")
        assert ingestor.verify_subscription("unsubscribe", "secret", "abc123") is None

    def test_no_token_configured(self, db):
        ingestor = WebhookIngestor(db, verify_token="")
        assert ingestor.verify_subscription("subscribe", "", "abc123") is None


# =============================================================================
# Events
# =============================================================================

class TestHandleEvent:
    """Tests for POSTed events."""

    @pytest.mark.asyncio
    async def test_stores_created_activity(self, db, session_factory, user, make_client):
        handler = Recorder(activity_response)
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event()) is True

        assert handler.requests[0].url.path == "/api/v3/activities/100"
        assert handler.requests[0].headers["Authorization"] == "Bearer access-1"
        async with session_factory() as session:
            activity = await session.scalar(select(Activity).where(Activity.strava_id == 100))
        assert activity.user_id == user.id
        assert activity.activity_type == "Ride"
        assert activity.name == "Lunch Ride"

    @pytest.mark.asyncio
    async def test_duplicate_delivery_stores_once(self, db, session_factory, user, make_client):
        handler = Recorder(activity_response, activity_response)
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event()) is True
        assert await ingestor.handle_event(create_event()) is True

        assert await count_activities(session_factory) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"aspect_type": "update"},
        {"aspect_type": "delete"},
        {"object_type": "athlete"},
    ])
    async def test_ignores_other_events(self, db, session_factory, user, make_client, overrides):
        handler = Recorder()
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event(**overrides)) is True

        assert handler.requests == []
        assert await count_activities(session_factory) == 0

    @pytest.mark.asyncio
    async def test_unknown_athlete(self, db, session_factory, user, make_client):
        handler = Recorder()
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event(owner_id=999)) is True
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_disconnected_user(self, db, session_factory, user, make_client):
        user.strava_access_token = None
        await db.commit()
        handler = Recorder()
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event()) is True
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_fetch_error_still_succeeds(self, db, session_factory, user, make_client):
        handler = Recorder(httpx.Response(500, text="upstream down"))
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event()) is True
        assert await count_activities(session_factory) == 0

    @pytest.mark.asyncio
    async def test_malformed_payload(self, db, user, make_client):
        handler = Recorder()
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event({"object_id": "not-a-number"}) is True
        assert handler.requests == []

    @pytest.mark.asyncio
    async def test_goes_through_rate_limiter(self, db, user, make_client, clock):
        handler = Recorder(activity_response)
        ingestor = WebhookIngestor(db, client=make_client(handler))

        await ingestor.handle_event(create_event())

        assert ingestor.client.limiter.get_usage()["used"] == 1
        assert clock.sleeps == [1.0]

    @pytest.mark.asyncio
    async def test_non_json_body_still_succeeds(self, db, session_factory, user, make_client):
        handler = Recorder(httpx.Response(200, text="<html>oops</html>"))
        ingestor = WebhookIngestor(db, client=make_client(handler))

        assert await ingestor.handle_event(create_event()) is True
        assert await count_activities(session_factory) == 0

    @pytest.mark.asyncio
    async def test_unexpected_error_still_succeeds(self, db, session_factory, user, make_client):
        handler = Recorder(activity_response)
        ingestor = WebhookIngestor(db, client=make_client(handler))

        async def broken_create(**kwargs):
            raise RuntimeError("disk full")

        ingestor.activities.create = broken_create

        assert await ingestor.handle_event(create_event()) is True
        assert await count_activities(session_factory) == 0
