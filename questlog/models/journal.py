"""
Journal Models
==============

SQLAlchemy model for journal entries.
"""

from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import (
    Boolean,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from questlog.db.base import Base, TimestampMixin


class Mood(str, Enum):
    """Mood an entry can be tagged with."""
    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    EXCITED = "excited"
    CALM = "calm"
    ANXIOUS = "anxious"
    NEUTRAL = "neutral"


class JournalEntry(Base, TimestampMixin):
    """
    Journal entry model.

    The calendar day an entry belongs to is derived from ``created_at`` in
    the owner's timezone; there is no separate date column.
    """

    __tablename__ = "journals"

    # Primary Key
    entry_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Foreign Key
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )

    # Entry details
    title: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )
    mood: Mapped[Optional[Mood]] = mapped_column(
        SQLEnum(Mood, name="mood", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    tags: Mapped[list] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
    )
    is_private: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    __table_args__ = (
        Index("idx_journals_user_created", "user_id", "created_at"),
        Index("idx_journals_user_mood", "user_id", "mood"),
    )

    def __repr__(self) -> str:
        return f"<JournalEntry(entry_id={self.entry_id}, user_id={self.user_id})>"
