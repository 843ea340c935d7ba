"""Builders for Strava payloads, activities and mocked HTTP."""

from datetime import datetime
from types import SimpleNamespace

import httpx

from fitrecap.features.activities.models import Activity


def strava_activity(activity_id: int, **overrides) -> dict:
    """Summary activity shaped like GET /athlete/activities items."""
    data = {
        "id": activity_id,
        "name": f"Activity {activity_id}",
        "type": "Run",
        "sport_type": "Run",
        "distance": 5000.0,
        "moving_time": 1500,
        "elapsed_time": 1600,
        "total_elevation_gain": 40.0,
        "start_date": "2024-03-17T07:30:00Z",
        "start_date_local": "2024-03-17T08:30:00Z",
        "timezone": "(GMT+01:00) Europe/Berlin",
        "location_city": "Berlin",
        "location_state": "Berlin",
        "location_country": "Germany",
        "kudos_count": 3,
    }
    data.update(overrides)
    return data


def make_activity(**overrides) -> Activity:
    """Transient Activity for the pure statistics functions."""
    values = {
        "strava_id": 1,
        "user_id": "user-1",
        "name": "Morning Run",
        "activity_type": "Run",
        "distance_m": 5000.0,
        "moving_time_s": 1500,
        "elapsed_time_s": 1600,
        "elevation_gain_m": 0.0,
        "start_date": datetime(2024, 3, 17, 8, 0),
        "timezone": "(GMT+00:00) UTC",
        "location_city": None,
        "location_state": None,
        "location_country": None,
        "raw_data": {},
    }
    values.update(overrides)
    return Activity(**values)


def plain_user(**overrides) -> SimpleNamespace:
    values = {"id": "user-1", "strava_access_token": "access-1"}
    values.update(overrides)
    return SimpleNamespace(**values)


class Recorder:
    """MockTransport handler that replays queued responses and logs requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if callable(response):
            return response(request)
        return response
