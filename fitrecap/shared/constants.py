"""
Shared constants for activity types and statistics.

Single source of truth for Strava activity type naming and the reference
figures used by the dashboard.
"""

from enum import Enum


class StravaActivityType(str, Enum):
    """
    Common activity types from Strava API.

    The list is open-ended: Strava adds types and unknown ones are stored
    as-is.
    """
    RUN = "Run"
    RIDE = "Ride"
    WALK = "Walk"
    HIKE = "Hike"
    SWIM = "Swim"
    WORKOUT = "Workout"


# Icons shown next to each type in the breakdown
ACTIVITY_TYPE_ICONS: dict[str, str] = {
    StravaActivityType.RUN.value: "🏃",
    StravaActivityType.RIDE.value: "🚴",
    StravaActivityType.WALK.value: "🚶",
    StravaActivityType.HIKE.value: "🥾",
    StravaActivityType.SWIM.value: "🏊",
    StravaActivityType.WORKOUT.value: "💪",
}
DEFAULT_ACTIVITY_ICON = "🏃"

MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Indexed by date.weekday() (Monday = 0)
WEEKDAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

# Fun-fact reference figures
EVEREST_HEIGHT_M = 8848
EARTH_CIRCUMFERENCE_KM = 40075
