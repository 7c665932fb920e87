"""
Database Models
===============

SQLAlchemy ORM models for all database entities.

All models are imported here to ensure they are registered
with SQLAlchemy's metadata for migrations and relationships.
"""

from questlog.models.user import User
from questlog.models.profile import Profile
from questlog.models.journal import JournalEntry, Mood
from questlog.models.achievement import Achievement, UserAchievement

__all__ = [
    "User",
    "Profile",
    "JournalEntry",
    "Mood",
    "Achievement",
    "UserAchievement",
]
