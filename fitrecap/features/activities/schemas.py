"""
Activity schemas.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class LocationSchema(BaseModel):
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class ActivityResponse(BaseModel):
    """Stored activity as returned to the dashboard."""

    strava_id: int
    name: str
    activity_type: str
    distance_m: float
    moving_time_s: int
    elapsed_time_s: int
    elevation_gain_m: Optional[float] = None
    start_date: datetime
    timezone: str
    location: LocationSchema
    raw_data: dict[str, Any]

    model_config = ConfigDict(from_attributes=True)


class ActivityListResponse(BaseModel):
    activities: list[ActivityResponse]
