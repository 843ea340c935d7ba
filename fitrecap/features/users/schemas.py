"""
User schemas.

Pydantic models for user operations.
"""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Create user request (first sign-in)."""

    email: str
    name: Optional[str] = None
    image: Optional[str] = None


class UserResponse(BaseModel):
    """User response."""

    id: str
    email: str
    name: Optional[str]
    image: Optional[str]
    strava_connected: bool
    strava_athlete_id: Optional[int]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
