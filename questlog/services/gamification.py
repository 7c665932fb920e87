"""
Gamification Rules
==================

Pure functions for the XP/level model, streak updates, entry XP and the
achievement unlock predicates. Nothing in here touches the database; the
progress service feeds it and persists the results.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Mapping, Optional
import uuid


XP_PER_LEVEL = 100

# Entry XP: 1 XP per 10 characters (capped) plus a bonus per tag
CHARS_PER_XP = 10
MAX_CONTENT_XP = 50
XP_PER_TAG = 5


# =============================================================================
# XP / Level
# =============================================================================

def xp_for_level(level: int) -> int:
    """XP needed to clear ``level`` and reach ``level + 1``."""
    if level < 1:
        raise ValueError("level must be >= 1")
    return level * XP_PER_LEVEL


def total_xp_for_level(level: int) -> int:
    """Cumulative XP at which ``level`` is reached."""
    if level < 1:
        raise ValueError("level must be >= 1")
    return XP_PER_LEVEL * (level - 1) * level // 2


@dataclass(frozen=True)
class LevelProgress:
    """Where a total XP figure sits inside the level ladder."""

    level: int
    total_xp: int
    xp_into_level: int
    xp_for_level: int

    @property
    def xp_to_next_level(self) -> int:
        return self.xp_for_level - self.xp_into_level

    @property
    def progress(self) -> float:
        """Fraction of the current level completed, in [0, 1)."""
        return self.xp_into_level / self.xp_for_level

    @property
    def progress_percent(self) -> int:
        """Progress shown to the user, clamped to 0..100."""
        return max(0, min(100, int(self.progress * 100)))

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "next_level": self.level + 1,
            "total_xp": self.total_xp,
            "xp_into_level": self.xp_into_level,
            "xp_for_level": self.xp_for_level,
            "xp_to_next_level": self.xp_to_next_level,
            "progress_percent": self.progress_percent,
        }


def level_for_xp(total_xp: int) -> int:
    """Level reached with ``total_xp`` experience points."""
    if total_xp < 0:
        raise ValueError("total_xp must be >= 0")

    level = 1
    remaining = total_xp
    while remaining >= xp_for_level(level):
        remaining -= xp_for_level(level)
        level += 1
    return level


def level_progress(total_xp: int) -> LevelProgress:
    """
    Resolve total XP into a level and the XP carried into it.

    Excess XP rolls over: with 100 XP for level 1 and 200 for level 2,
    250 XP is level 2 with 150/200 progress.
    """
    level = level_for_xp(total_xp)

    return LevelProgress(
        level=level,
        total_xp=total_xp,
        xp_into_level=total_xp - total_xp_for_level(level),
        xp_for_level=xp_for_level(level),
    )


def entry_xp(content: Optional[str], tags: Iterable[str] = ()) -> int:
    """XP granted for writing one entry."""
    content_xp = min(len(content or "") // CHARS_PER_XP, MAX_CONTENT_XP)
    return content_xp + XP_PER_TAG * len(list(tags))


# =============================================================================
# Streaks
# =============================================================================

def next_streak_count(
    today: date,
    last_date: Optional[date],
    prior_count: int,
) -> int:
    """
    Streak count after writing an entry on ``today``.

    The gap is a whole-day difference between full dates so month and year
    boundaries count correctly. Writing again on the same day as the last
    recorded entry also increments the count.
    """
    if last_date is None:
        return 1

    gap = (today - last_date).days
    if gap in (0, 1):
        return prior_count + 1
    if gap > 1:
        return 1
    # today precedes the stored date (clock skew); leave the streak alone
    return prior_count


# =============================================================================
# Achievements
# =============================================================================

FIRST_JOURNAL = "First Journal"
THREE_DAY_STREAK = "3-Day Streak"
SEVEN_DAY_STREAK = "7-Day Streak"
MOOD_TRACKER = "Mood Tracker"
TAG_MASTER = "Tag Master"
WORDSMITH = "Wordsmith"

TAG_MASTER_THRESHOLD = 5
WORDSMITH_THRESHOLD = 500

DEFAULT_ACHIEVEMENTS = [
    {
        "name": FIRST_JOURNAL,
        "description": "Created your first journal entry",
        "icon": "📝",
        "xp_reward": 50,
    },
    {
        "name": THREE_DAY_STREAK,
        "description": "Journaled for 3 days in a row",
        "icon": "🔥",
        "xp_reward": 100,
    },
    {
        "name": SEVEN_DAY_STREAK,
        "description": "Journaled for 7 days in a row",
        "icon": "🔥🔥",
        "xp_reward": 200,
    },
    {
        "name": MOOD_TRACKER,
        "description": "Tracked your mood for the first time",
        "icon": "😊",
        "xp_reward": 30,
    },
    {
        "name": TAG_MASTER,
        "description": f"Used {TAG_MASTER_THRESHOLD} different tags in your journals",
        "icon": "🏷️",
        "xp_reward": 75,
    },
    {
        "name": WORDSMITH,
        "description": f"Wrote a journal with more than {WORDSMITH_THRESHOLD} words",
        "icon": "✍️",
        "xp_reward": 100,
    },
]


@dataclass(frozen=True)
class ProgressSnapshot:
    """Facts about a user's journaling that unlock rules look at."""

    entry_count: int = 0
    streak_count: int = 0
    has_mood: bool = False
    distinct_tags: int = 0
    max_words: int = 0


UNLOCK_RULES: dict[str, Callable[[ProgressSnapshot], bool]] = {
    FIRST_JOURNAL: lambda s: s.entry_count >= 1,
    THREE_DAY_STREAK: lambda s: s.streak_count >= 3,
    SEVEN_DAY_STREAK: lambda s: s.streak_count >= 7,
    MOOD_TRACKER: lambda s: s.has_mood,
    TAG_MASTER: lambda s: s.distinct_tags >= TAG_MASTER_THRESHOLD,
    WORDSMITH: lambda s: s.max_words > WORDSMITH_THRESHOLD,
}


def eligible_achievements(snapshot: ProgressSnapshot) -> list[str]:
    """Names of every achievement whose rule ``snapshot`` satisfies."""
    return [name for name, rule in UNLOCK_RULES.items() if rule(snapshot)]


@dataclass
class AchievementStatus:
    """An achievement together with whether the user has it."""

    achievement_id: uuid.UUID
    name: str
    description: str
    icon: Optional[str]
    xp_reward: int
    unlocked: bool = False
    achieved_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "achievement_id": str(self.achievement_id),
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "xp_reward": self.xp_reward,
            "unlocked": self.unlocked,
            "achieved_at": self.achieved_at.isoformat() if self.achieved_at else None,
        }


def achievement_statuses(
    achievements: Iterable,
    unlocked: Mapping[uuid.UUID, datetime],
) -> list[AchievementStatus]:
    """
    Mark each achievement locked or unlocked.

    ``unlocked`` maps achievement id to unlock time; membership alone
    decides the status.
    """
    return [
        AchievementStatus(
            achievement_id=a.achievement_id,
            name=a.name,
            description=a.description,
            icon=a.icon,
            xp_reward=a.xp_reward,
            unlocked=a.achievement_id in unlocked,
            achieved_at=unlocked.get(a.achievement_id),
        )
        for a in achievements
    ]
