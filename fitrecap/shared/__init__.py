"""
Shared utilities (NOT business logic).

Usage:
    from fitrecap.shared import BaseRepository
    from fitrecap.shared.constants import MONTH_NAMES
"""
from .repository import BaseRepository
from .constants import StravaActivityType

__all__ = [
    "BaseRepository",
    "StravaActivityType",
]
