"""
User Routes

Endpoints for user registration and profile.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fitrecap.api.deps import get_current_user
from fitrecap.db.session import get_async_db
from fitrecap.features.users import User, UserCreate, UserResponse, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UserResponse)
async def sign_in(payload: UserCreate, db: AsyncSession = Depends(get_async_db)):
    """
    Get or create a user on sign-in.

    Called by the authentication layer after a successful local or
    federated sign-in.
    """
    user, created = await UserRepository(db).get_or_create(
        payload.email,
        name=payload.name,
        image=payload.image
    )
    await db.commit()

    if created:
        logger.info(f"Created user {user.id} ({user.email})")

    return user


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get current user profile."""
    return user
