"""
Activity model.

One workout session synced from Strava. The full provider payload is kept
in `raw_data` so records can be reprocessed without refetching.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import (
    Column, String, DateTime, Integer, Float, ForeignKey, BigInteger, JSON, Index
)
from sqlalchemy.orm import relationship

from fitrecap.models.base import Base

UTC = timezone.utc


class Activity(Base):
    """
    Synced Strava activity.

    `strava_id` is unique across the whole store (not per user).
    (user_id, start_date) is only used for ordering.
    """

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    strava_id = Column(BigInteger, unique=True, nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    # Activity info
    name = Column(String(255), nullable=False, default="")
    activity_type = Column(String(50), nullable=False)  # Run, Ride, Walk, Hike...

    # Core metrics
    distance_m = Column(Float, nullable=False, default=0.0)
    moving_time_s = Column(Integer, nullable=False, default=0)
    elapsed_time_s = Column(Integer, nullable=False, default=0)
    elevation_gain_m = Column(Float, nullable=True)

    # Time
    start_date = Column(DateTime, nullable=False)  # naive UTC
    timezone = Column(String(100), nullable=False, default="")

    # Location
    location_city = Column(String(255), nullable=True)
    location_state = Column(String(255), nullable=True)
    location_country = Column(String(255), nullable=True)

    # Full provider response
    raw_data = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="activities")

    def __repr__(self):
        return f"<Activity {self.strava_id} {self.activity_type} {self.distance_m}m>"

    @property
    def location(self) -> dict:
        """City/state/country nested the way API consumers expect it."""
        return {
            "city": self.location_city,
            "state": self.location_state,
            "country": self.location_country,
        }

    @property
    def local_start(self) -> datetime:
        """
        Start time in the activity's own timezone.

        Strava timezones look like "(GMT-08:00) America/Los_Angeles"; the
        IANA name after the offset is used. Falls back to UTC.
        """
        start = self.start_date
        if start.tzinfo is None:
            start = start.replace(tzinfo=UTC)
        return start.astimezone(zone_from_strava(self.timezone))


def zone_from_strava(value: str | None):
    """Resolve a Strava timezone string to a tzinfo (UTC if unknown)."""
    if not value:
        return UTC
    name = value.rsplit(" ", 1)[-1] if ")" in value else value.strip()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return UTC


# Per-user chronological queries (newest first)
Index(
    "ix_activities_user_start_date",
    Activity.user_id,
    Activity.start_date.desc(),
)
