"""
Achievement Service
===================

Reads the achievement catalog and the user's unlocks, and awards new
unlocks idempotently.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.models.achievement import Achievement, UserAchievement
from questlog.services.gamification import AchievementStatus, achievement_statuses
from questlog.utils.helpers import utc_now

logger = logging.getLogger(__name__)


class AchievementService:
    """Service for achievement operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_achievements(self) -> list[Achievement]:
        """Every achievement, cheapest reward first."""
        stmt = select(Achievement).order_by(Achievement.xp_reward, Achievement.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_names(self, names: Iterable[str]) -> list[Achievement]:
        """Achievements with the given names."""
        names = list(names)
        if not names:
            return []
        stmt = select(Achievement).where(Achievement.name.in_(names))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_unlocked(self, user_id: uuid.UUID) -> dict[uuid.UUID, datetime]:
        """Map of achievement id to unlock time for the user."""
        stmt = select(
            UserAchievement.achievement_id,
            UserAchievement.achieved_at,
        ).where(UserAchievement.user_id == user_id)
        result = await self.db.execute(stmt)
        return {row.achievement_id: row.achieved_at for row in result.all()}

    async def get_statuses(self, user_id: uuid.UUID) -> list[AchievementStatus]:
        """Every achievement with the user's locked/unlocked status."""
        achievements = await self.list_achievements()
        unlocked = await self.get_unlocked(user_id)
        return achievement_statuses(achievements, unlocked)

    async def award(
        self,
        user_id: uuid.UUID,
        achievement: Achievement,
        unlocked: Optional[dict[uuid.UUID, datetime]] = None,
    ) -> Optional[UserAchievement]:
        """
        Unlock ``achievement`` for the user.

        Returns the new record, or ``None`` when it was already unlocked.
        ``unlocked`` may be passed to skip the lookup and is updated in place.
        """
        if unlocked is None:
            unlocked = await self.get_unlocked(user_id)
        if achievement.achievement_id in unlocked:
            return None

        record = UserAchievement(
            user_id=user_id,
            achievement_id=achievement.achievement_id,
            achieved_at=utc_now(),
        )
        self.db.add(record)
        await self.db.flush()

        unlocked[achievement.achievement_id] = record.achieved_at
        logger.info("User %s unlocked achievement %r", user_id, achievement.name)
        return record
