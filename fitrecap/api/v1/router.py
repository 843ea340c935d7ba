"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from fitrecap.api.v1.routes import users, strava, statistics

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(strava.router, tags=["Strava"])
api_router.include_router(statistics.router, tags=["Statistics"])
