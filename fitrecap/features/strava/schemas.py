"""
Strava payload schemas.

Strava responses carry many more fields than we use. `StravaActivityPayload`
validates the ones the sync needs and keeps the rest (extra="allow").
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class StravaActivityPayload(BaseModel):
    """Summary or detailed activity as returned by Strava."""

    id: int
    name: Optional[str] = None
    type: Optional[str] = None
    sport_type: Optional[str] = None
    distance: Optional[float] = None
    moving_time: Optional[int] = None
    elapsed_time: Optional[int] = None
    total_elevation_gain: Optional[float] = None
    start_date: datetime
    timezone: Optional[str] = None
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    location_country: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class WebhookEvent(BaseModel):
    """Strava push subscription event."""

    object_type: Optional[str] = None
    aspect_type: Optional[str] = None
    object_id: Optional[int] = None
    owner_id: Optional[int] = None
    event_time: Optional[int] = None
    updates: Optional[dict] = None

    model_config = ConfigDict(extra="allow")


class SyncResponse(BaseModel):
    """Result of a full resync."""

    success: bool = True
    synced: int
    updated: int
    total: int
    failed: int = 0
