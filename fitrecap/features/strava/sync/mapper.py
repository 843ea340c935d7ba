"""
Strava payload -> local Activity record.

Known fields are pulled out explicitly; the full payload is kept verbatim
in `raw_data`.
"""

from datetime import datetime, timezone

from ..schemas import StravaActivityPayload


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC (how start_date is stored)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def build_activity_record(data: dict, user_id: str) -> dict:
    """
    Map one Strava activity to column values of `Activity`.

    Args:
        data: Raw activity JSON from Strava
        user_id: Owning user

    Returns:
        Dict of Activity column values (every mapped column is present, so
        an update with it overwrites the whole record)
    """
    payload = StravaActivityPayload.model_validate(data)

    return {
        "strava_id": payload.id,
        "user_id": user_id,
        "name": payload.name or "",
        "activity_type": payload.type or payload.sport_type or "Unknown",
        "distance_m": payload.distance or 0.0,
        "moving_time_s": payload.moving_time or 0,
        "elapsed_time_s": payload.elapsed_time or 0,
        "elevation_gain_m": payload.total_elevation_gain,
        "start_date": to_utc_naive(payload.start_date),
        "timezone": payload.timezone or "",
        "location_city": payload.location_city,
        "location_state": payload.location_state,
        "location_country": payload.location_country,
        "raw_data": data,
    }
