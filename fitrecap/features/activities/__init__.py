"""
Activity storage module.

Usage:
    from fitrecap.features.activities import Activity, ActivityRepository
"""

from .models import Activity
from .schemas import ActivityResponse, ActivityListResponse, LocationSchema
from .repository import ActivityRepository

__all__ = [
    "Activity",
    "ActivityResponse",
    "ActivityListResponse",
    "LocationSchema",
    "ActivityRepository",
]
