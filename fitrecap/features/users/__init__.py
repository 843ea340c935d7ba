"""
User management module.

Usage:
    from fitrecap.features.users import User, UserRepository
"""

from .models import User
from .schemas import UserCreate, UserResponse
from .repository import UserRepository

__all__ = [
    # Models
    "User",
    # Schemas
    "UserCreate",
    "UserResponse",
    # Repositories
    "UserRepository",
]
