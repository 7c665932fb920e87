"""Initial schema: users, profiles, journals and achievements

Revision ID: 5f1c2a7e9b30
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
from typing import Sequence, Union
import uuid

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "5f1c2a7e9b30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


MOOD_VALUES = ("happy", "sad", "angry", "excited", "calm", "anxious", "neutral")

# Frozen copy of the catalog at the time of this revision
ACHIEVEMENTS = (
    ("First Journal", "Created your first journal entry", "📝", 50),
    ("3-Day Streak", "Journaled for 3 days in a row", "🔥", 100),
    ("7-Day Streak", "Journaled for 7 days in a row", "🔥🔥", 200),
    ("Mood Tracker", "Tracked your mood for the first time", "😊", 30),
    ("Tag Master", "Used 5 different tags in your journals", "🏷️", 75),
    ("Wordsmith", "Wrote a journal with more than 500 words", "✍️", 100),
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade database schema."""

    # ------------------------------------------------------------------
    # 1. Accounts and profiles
    # ------------------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("user_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        sa.Column("xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("streak_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_streak_date", sa.Date(), nullable=True),
        sa.Column(
            "email_notifications",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("reminder_time", sa.String(5), nullable=False, server_default="20:00"),
        *_timestamps(),
        sa.CheckConstraint("xp >= 0", name="ck_profiles_xp_non_negative"),
        sa.CheckConstraint("level >= 1", name="ck_profiles_level_positive"),
        sa.CheckConstraint("streak_count >= 0", name="ck_profiles_streak_non_negative"),
    )
    op.create_index("ix_profiles_username", "profiles", ["username"], unique=True)

    # ------------------------------------------------------------------
    # 2. Journal entries
    # ------------------------------------------------------------------
    mood_enum = postgresql.ENUM(*MOOD_VALUES, name="mood", create_type=False)
    mood_enum.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "journals",
        sa.Column("entry_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("mood", mood_enum, nullable=True),
        sa.Column(
            "tags",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.Column("is_private", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("idx_journals_user_created", "journals", ["user_id", "created_at"])
    op.create_index("idx_journals_user_mood", "journals", ["user_id", "mood"])

    # ------------------------------------------------------------------
    # 3. Achievements and unlocks
    # ------------------------------------------------------------------
    achievements = op.create_table(
        "achievements",
        sa.Column("achievement_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(20), nullable=True),
        sa.Column("xp_reward", sa.Integer(), nullable=False, server_default="0"),
    )

    op.create_table(
        "user_achievements",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.user_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "achievement_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("achievements.achievement_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "achieved_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    op.bulk_insert(
        achievements,
        [
            {
                "achievement_id": uuid.uuid4(),
                "name": name,
                "description": description,
                "icon": icon,
                "xp_reward": xp_reward,
            }
            for name, description, icon, xp_reward in ACHIEVEMENTS
        ],
    )


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table("user_achievements")
    op.drop_table("achievements")

    op.drop_index("idx_journals_user_mood", table_name="journals")
    op.drop_index("idx_journals_user_created", table_name="journals")
    op.drop_table("journals")
    postgresql.ENUM(name="mood").drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_profiles_username", table_name="profiles")
    op.drop_table("profiles")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
