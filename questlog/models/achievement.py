"""
Achievement Models
==================

Static achievement reference data and the per-user unlock records.
"""

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from questlog.db.base import Base


class Achievement(Base):
    """
    Achievement model.

    Seeded by migration; never written by the API.
    """

    __tablename__ = "achievements"

    # Primary Key
    achievement_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    icon: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
    )
    xp_reward: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    def __repr__(self) -> str:
        return f"<Achievement(name={self.name}, xp_reward={self.xp_reward})>"


class UserAchievement(Base):
    """
    User achievement model.

    One row per (user, achievement) pair.
    """

    __tablename__ = "user_achievements"

    # Primary Key
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # Foreign Keys
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    achievement_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("achievements.achievement_id", ondelete="CASCADE"),
        nullable=False,
    )

    achieved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    # Relationships
    achievement: Mapped["Achievement"] = relationship(
        "Achievement",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    def __repr__(self) -> str:
        return f"<UserAchievement(user_id={self.user_id}, achievement_id={self.achievement_id})>"
