"""
Profile Model
=============

Public profile and gamification state (XP, level, streak) for a user.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from questlog.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from questlog.models.user import User


class Profile(Base, TimestampMixin):
    """
    User profile model.

    Created at signup. ``xp``/``level`` and ``streak_count``/``last_streak_date``
    are only written by the progress service after an entry is created.
    """

    __tablename__ = "profiles"

    # Primary Key (shared with users)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        primary_key=True,
    )

    # Identity
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    avatar_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    timezone: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="UTC",
    )

    # Gamification
    xp: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=1,
    )
    streak_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )
    last_streak_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    # Notification preferences
    email_notifications: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )
    reminder_time: Mapped[str] = mapped_column(
        String(5),
        nullable=False,
        default="20:00",
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="profile",
    )

    __table_args__ = (
        CheckConstraint("xp >= 0", name="ck_profiles_xp_non_negative"),
        CheckConstraint("level >= 1", name="ck_profiles_level_positive"),
        CheckConstraint("streak_count >= 0", name="ck_profiles_streak_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Profile(user_id={self.user_id}, username={self.username})>"
