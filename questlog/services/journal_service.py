"""
Journal Service
===============

Data access for journal entries: CRUD, search and the time-ranged reads
the statistics are computed from.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.core.errors import ErrorCodes, NotFoundError
from questlog.models.journal import JournalEntry, Mood
from questlog.schemas.common import PaginationMeta
from questlog.schemas.journal import JournalEntryCreate, JournalEntryUpdate
from questlog.services.stats import word_count
from questlog.utils.helpers import LIKE_ESCAPE, escape_like, utc_now


MOOD_ICONS = {
    Mood.HAPPY: "😊",
    Mood.SAD: "😢",
    Mood.ANGRY: "😠",
    Mood.EXCITED: "🤩",
    Mood.CALM: "😌",
    Mood.ANXIOUS: "😰",
    Mood.NEUTRAL: "😐",
}
DEFAULT_ICON = "📝"


def get_mood_icon(mood: Optional[Mood]) -> str:
    """Emoji shown next to an entry; a notepad when there is no mood."""
    if mood is None:
        return DEFAULT_ICON
    return MOOD_ICONS.get(mood, DEFAULT_ICON)


def entry_to_dict(entry: JournalEntry) -> dict:
    """Convert a journal entry to its API representation."""
    return {
        "entry_id": str(entry.entry_id),
        "title": entry.title,
        "content": entry.content,
        "mood": entry.mood.value if entry.mood else None,
        "mood_icon": get_mood_icon(entry.mood),
        "tags": list(entry.tags or []),
        "is_private": entry.is_private,
        "word_count": word_count(entry.content),
        "created_at": entry.created_at.isoformat(),
        "updated_at": entry.updated_at.isoformat(),
    }


class JournalService:
    """Service for journal operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_entry_by_id(
        self,
        entry_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> Optional[JournalEntry]:
        """Get journal entry by ID ensuring it belongs to user."""
        stmt = select(JournalEntry).where(
            JournalEntry.entry_id == entry_id,
            JournalEntry.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned_entry(
        self,
        entry_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> JournalEntry:
        """
        Like ``get_entry_by_id`` but raises when missing.

        Entries owned by someone else are reported as missing too.
        """
        entry = await self.get_entry_by_id(entry_id, user_id)
        if entry is None:
            raise NotFoundError(
                code=ErrorCodes.JOURNAL_NOT_FOUND,
                message="Journal entry not found",
            )
        return entry

    async def create_entry(
        self,
        user_id: uuid.UUID,
        entry_data: JournalEntryCreate,
    ) -> JournalEntry:
        """Create a new journal entry."""
        now = utc_now()
        entry = JournalEntry(
            user_id=user_id,
            title=entry_data.title,
            content=entry_data.content,
            mood=entry_data.mood,
            tags=entry_data.tags,
            is_private=entry_data.is_private,
            created_at=now,
            updated_at=now,
        )
        self.db.add(entry)
        await self.db.flush()

        return entry

    async def update_entry(
        self,
        entry: JournalEntry,
        entry_data: JournalEntryUpdate,
    ) -> JournalEntry:
        """
        Update an existing journal entry.

        Only fields present in the request change; ``mood`` may be
        explicitly cleared with ``null``.
        """
        changes = entry_data.model_dump(exclude_unset=True)

        for name in ("title", "content", "tags", "is_private"):
            value = changes.get(name)
            if value is not None:
                setattr(entry, name, value)
        if "mood" in changes:
            entry.mood = changes["mood"]

        entry.updated_at = utc_now()
        await self.db.flush()
        return entry

    async def delete_entry(self, entry: JournalEntry) -> None:
        """Delete a journal entry."""
        await self.db.delete(entry)
        await self.db.flush()

    async def get_entries_paginated(
        self,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        mood_filter: Optional[Mood] = None,
        tag: Optional[str] = None,
    ) -> dict:
        """
        Get paginated journal entries, newest first.

        ``search`` matches title or content case-insensitively.
        """
        conditions = [JournalEntry.user_id == user_id]

        if search:
            pattern = f"%{escape_like(search)}%"
            conditions.append(
                or_(
                    JournalEntry.title.ilike(pattern, escape=LIKE_ESCAPE),
                    JournalEntry.content.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        if mood_filter:
            conditions.append(JournalEntry.mood == mood_filter)
        if tag:
            conditions.append(JournalEntry.tags.contains([tag]))

        count_stmt = select(func.count()).select_from(JournalEntry).where(
            and_(*conditions)
        )
        count_result = await self.db.execute(count_stmt)
        total = count_result.scalar() or 0

        entries_stmt = (
            select(JournalEntry)
            .where(and_(*conditions))
            .order_by(JournalEntry.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        entries_result = await self.db.execute(entries_stmt)
        entries = list(entries_result.scalars().all())

        return {
            "entries": entries,
            "pagination": PaginationMeta.build(page, limit, total),
        }

    async def get_recent_entries(
        self,
        user_id: uuid.UUID,
        limit: int = 5,
    ) -> list[JournalEntry]:
        """Get most recent journal entries."""
        stmt = (
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_entries_between(
        self,
        user_id: uuid.UUID,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[JournalEntry]:
        """Entries created in ``[start, end)``, oldest first."""
        conditions = [JournalEntry.user_id == user_id]
        if start is not None:
            conditions.append(JournalEntry.created_at >= start)
        if end is not None:
            conditions.append(JournalEntry.created_at < end)

        stmt = (
            select(JournalEntry)
            .where(and_(*conditions))
            .order_by(JournalEntry.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_all_entries(self, user_id: uuid.UUID) -> list[JournalEntry]:
        """Every entry of the user, oldest first."""
        return await self.get_entries_between(user_id)
