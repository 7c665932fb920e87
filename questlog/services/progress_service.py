"""
Progress Service
================

Applies the gamification rules after a journal entry is written: entry XP,
streak update and achievement unlocks.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from questlog.models.achievement import Achievement
from questlog.models.journal import JournalEntry
from questlog.models.profile import Profile
from questlog.services.achievement_service import AchievementService
from questlog.services.gamification import (
    LevelProgress,
    eligible_achievements,
    entry_xp,
)
from questlog.services.journal_service import JournalService
from questlog.services.profile_service import ProfileService
from questlog.services.stats import progress_snapshot
from questlog.utils.helpers import calendar_day, resolve_timezone, utc_now

logger = logging.getLogger(__name__)


@dataclass
class ProgressResult:
    """What writing one entry earned."""

    entry_xp: int
    streak_count: int
    level: LevelProgress
    previous_level: int
    unlocked: list[Achievement] = field(default_factory=list)

    @property
    def achievement_xp(self) -> int:
        return sum(a.xp_reward for a in self.unlocked)

    @property
    def xp_earned(self) -> int:
        return self.entry_xp + self.achievement_xp

    @property
    def leveled_up(self) -> bool:
        return self.level.level > self.previous_level

    def to_dict(self) -> dict:
        return {
            "xp_earned": self.xp_earned,
            "entry_xp": self.entry_xp,
            "achievement_xp": self.achievement_xp,
            "streak_count": self.streak_count,
            "leveled_up": self.leveled_up,
            "level_progress": self.level.to_dict(),
            "achievements_unlocked": [
                {
                    "achievement_id": str(a.achievement_id),
                    "name": a.name,
                    "icon": a.icon,
                    "xp_reward": a.xp_reward,
                }
                for a in self.unlocked
            ],
        }


class ProgressService:
    """Service that turns new entries into XP, streaks and achievements."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.journals = JournalService(db)
        self.profiles = ProfileService(db)
        self.achievements = AchievementService(db)

    async def record_entry(
        self,
        profile: Profile,
        entry: JournalEntry,
    ) -> ProgressResult:
        """
        Update the profile for a newly created entry.

        The streak day is the entry's calendar day in the profile's timezone.
        Every achievement whose rule now holds and which the user does not
        have yet is unlocked, and its reward is added to the XP total.
        """
        previous_level = profile.level
        tz = resolve_timezone(profile.timezone)
        today = calendar_day(entry.created_at or utc_now(), tz)

        earned = entry_xp(entry.content, entry.tags or [])
        streak = self.profiles.record_streak(profile, today)

        entries = await self.journals.get_all_entries(profile.user_id)
        snapshot = progress_snapshot(entries, streak)
        candidates = await self.achievements.get_by_names(
            eligible_achievements(snapshot)
        )

        unlocked_map = await self.achievements.get_unlocked(profile.user_id)
        unlocked: list[Achievement] = []
        for achievement in candidates:
            record = await self.achievements.award(
                profile.user_id, achievement, unlocked=unlocked_map
            )
            if record is not None:
                unlocked.append(achievement)

        level = await self.profiles.add_xp(
            profile, earned + sum(a.xp_reward for a in unlocked)
        )
        profile.updated_at = utc_now()
        await self.db.flush()

        result = ProgressResult(
            entry_xp=earned,
            streak_count=streak,
            level=level,
            previous_level=previous_level,
            unlocked=unlocked,
        )
        logger.info(
            "Entry %s earned %d XP for user %s (streak %d, %d achievements)",
            entry.entry_id,
            result.xp_earned,
            profile.user_id,
            streak,
            len(unlocked),
        )
        return result
