"""
Strava sync services.

Provides:
- ActivityFetcher: Paginated fetch with 429/401 handling
- StravaSyncService: Reconciliation and bulk upsert
- build_activity_record: Strava payload -> Activity columns
"""

from .config import SyncConfig
from .fetcher import ActivityFetcher, backoff_seconds
from .mapper import build_activity_record
from .service import (
    StravaSyncService,
    SyncResult,
    WriteOperation,
    OperationKind,
    plan_operations,
)

__all__ = [
    "SyncConfig",
    "ActivityFetcher",
    "backoff_seconds",
    "build_activity_record",
    "StravaSyncService",
    "SyncResult",
    "WriteOperation",
    "OperationKind",
    "plan_operations",
]
