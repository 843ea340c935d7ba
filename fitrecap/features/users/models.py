"""
User-related models.

Models:
- User: Application user with email auth and Strava connection
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Boolean, Integer, BigInteger, Text
from sqlalchemy.orm import relationship, validates
import uuid

from fitrecap.models.base import Base


class User(Base):
    """
    Application user.

    Created on first sign-in (local or federated). Holds the Strava token
    pair once the user connects their account. Users are never hard-deleted.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Profile
    name = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    password_hash = Column(String(255), nullable=True)

    # Strava integration (tokens should be encrypted in production)
    strava_access_token = Column(Text, nullable=True)
    strava_refresh_token = Column(Text, nullable=True)
    strava_token_expires_at = Column(Integer, nullable=True)  # Unix timestamp
    strava_connected = Column(Boolean, default=False, nullable=False)
    strava_athlete_id = Column(BigInteger, nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    activities = relationship(
        "Activity",
        back_populates="user",
        lazy="raise",
    )

    @validates("email")
    def _normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def __repr__(self):
        return f"<User {self.id} ({self.email})>"
