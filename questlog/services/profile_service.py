"""
Profile Service
===============

Profile reads, settings edits and the XP/streak mutations applied after an
entry is written.
"""

import logging
from datetime import date
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.core.errors import ConflictError, ErrorCodes, NotFoundError
from questlog.models.profile import Profile
from questlog.schemas.profile import ProfileUpdate
from questlog.services.gamification import (
    LevelProgress,
    level_progress,
    next_streak_count,
)
from questlog.utils.helpers import utc_now
from questlog.utils.validators import validate_timezone

logger = logging.getLogger(__name__)


def profile_to_dict(profile: Profile) -> dict:
    """Serialize a profile together with its level progress."""
    return {
        "user_id": str(profile.user_id),
        "username": profile.username,
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
        "timezone": profile.timezone,
        "xp": profile.xp,
        "level": profile.level,
        "streak_count": profile.streak_count,
        "last_streak_date": (
            profile.last_streak_date.isoformat() if profile.last_streak_date else None
        ),
        "preferences": {
            "email_notifications": profile.email_notifications,
            "reminder_time": profile.reminder_time,
        },
        "level_progress": level_progress(profile.xp).to_dict(),
    }


class ProfileService:
    """Service for profile operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: uuid.UUID) -> Profile:
        """Get the profile for ``user_id``; raises if the user has none."""
        stmt = select(Profile).where(Profile.user_id == user_id)
        result = await self.db.execute(stmt)
        profile = result.scalar_one_or_none()

        if profile is None:
            raise NotFoundError(
                code=ErrorCodes.PROFILE_NOT_FOUND,
                message="Profile not found",
            )
        return profile

    async def get_profile_by_username(self, username: str) -> Optional[Profile]:
        """Get a profile by its username."""
        stmt = select(Profile).where(Profile.username == username)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def update_profile(
        self,
        profile: Profile,
        profile_data: ProfileUpdate,
    ) -> Profile:
        """Apply settings edits; username must stay unique."""
        changes = profile_data.model_dump(exclude_unset=True, exclude_none=True)
        validate_timezone(changes.get("timezone"))

        username = changes.get("username")
        if username is not None:
            username = username.lower()
            changes["username"] = username
            if username != profile.username:
                other = await self.get_profile_by_username(username)
                if other is not None:
                    raise ConflictError(
                        code=ErrorCodes.PROFILE_USERNAME_TAKEN,
                        message="Username is already taken",
                        field="username",
                    )

        for name, value in changes.items():
            setattr(profile, name, value)
        profile.updated_at = utc_now()

        await self.db.flush()
        return profile

    async def add_xp(self, profile: Profile, amount: int) -> LevelProgress:
        """
        Add XP and recompute the level from the new total.

        XP only grows; negative amounts are rejected.
        """
        if amount < 0:
            raise ValueError("XP awards must be non-negative")

        profile.xp = (profile.xp or 0) + amount
        progress = level_progress(profile.xp)
        if progress.level != profile.level:
            logger.info(
                "User %s reached level %d (%d XP)",
                profile.user_id,
                progress.level,
                profile.xp,
            )
        profile.level = progress.level
        return progress

    def record_streak(self, profile: Profile, today: date) -> int:
        """Advance the streak for an entry written on ``today``."""
        profile.streak_count = next_streak_count(
            today,
            profile.last_streak_date,
            profile.streak_count or 0,
        )
        profile.last_streak_date = today
        return profile.streak_count
