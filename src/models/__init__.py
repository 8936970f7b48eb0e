"""Database model type definitions."""

from src.models.user import ProfileDocument, UserChanges, UserRecord

__all__ = [
    "ProfileDocument",
    "UserChanges",
    "UserRecord",
]
