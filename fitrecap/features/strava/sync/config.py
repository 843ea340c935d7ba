"""
Strava sync configuration constants.

Contains all configuration values for sync behavior.
"""


class SyncConfig:
    """Configuration for sync behavior."""

    # How many activities to fetch per API call (Strava maximum)
    ACTIVITIES_PER_PAGE = 200

    # ==========================================================================
    # 429 handling
    # ==========================================================================
    # Retries of the same page after a 429 before giving up
    RATE_LIMIT_MAX_RETRIES = 3

    # Backoff when Strava sends no Retry-After: 60s, 120s, 240s... capped
    RATE_LIMIT_BACKOFF_BASE_SECONDS = 60
    RATE_LIMIT_BACKOFF_MAX_SECONDS = 300

    # ==========================================================================
    # Bulk writes
    # ==========================================================================
    # Max insert/update operations per database round-trip
    BULK_WRITE_BATCH_SIZE = 1000
