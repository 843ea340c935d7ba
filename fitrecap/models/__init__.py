"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy.

Note: Feature models are imported lazily to avoid circular imports.
Use direct imports from features/ modules when possible.
"""

from fitrecap.models.base import Base


def _get_user_models():
    """Lazy import of User models."""
    from fitrecap.features.users.models import User
    return User


def _get_activity_models():
    """Lazy import of Activity models."""
    from fitrecap.features.activities.models import Activity
    return Activity


def __getattr__(name):
    if name == "User":
        return _get_user_models()
    if name == "Activity":
        return _get_activity_models()

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Base",
    "User",
    "Activity",
]
