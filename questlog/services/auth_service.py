"""
Authentication Service
======================

Business logic for registration, login and token refresh.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.core.security import (
    create_tokens_for_user,
    decode_token,
    hash_password,
    verify_password,
)
from questlog.models.profile import Profile
from questlog.models.user import User
from questlog.schemas.auth import UserRegister
from questlog.utils.validators import validate_timezone

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        stmt = select(User).where(User.email == email.lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get user by ID."""
        stmt = select(User).where(User.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def username_taken(self, username: str) -> bool:
        """Whether a profile already uses ``username``."""
        stmt = select(Profile.user_id).where(Profile.username == username)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create_user(self, user_data: UserRegister) -> User:
        """
        Create a new user together with a fresh profile.

        The profile starts at level 1 with no XP and no streak.
        """
        validate_timezone(user_data.timezone)

        user = User(
            email=user_data.email.lower(),
            password_hash=hash_password(user_data.password),
            profile=Profile(
                username=user_data.username,
                full_name=user_data.full_name,
                timezone=user_data.timezone,
                xp=0,
                level=1,
                streak_count=0,
            ),
        )
        self.db.add(user)
        await self.db.flush()

        logger.info("Registered user %s (%s)", user.user_id, user_data.username)
        return user

    async def authenticate_user(
        self,
        email: str,
        password: str,
    ) -> Optional[User]:
        """
        Authenticate user by email and password.

        Returns:
            User if authentication successful, None otherwise
        """
        user = await self.get_user_by_email(email)

        if user is None or user.password_hash is None:
            return None

        if not verify_password(password, user.password_hash):
            return None

        user.last_login = datetime.now(timezone.utc)
        return user

    async def refresh_tokens(self, refresh_token: str) -> Optional[dict]:
        """
        Generate new tokens from a refresh token.

        Returns:
            New tokens if refresh token is valid, None otherwise
        """
        payload = decode_token(refresh_token)

        if payload is None or payload.get("type") != "refresh":
            return None

        user_id_str = payload.get("sub")
        if user_id_str is None:
            return None

        try:
            user_id = uuid.UUID(user_id_str)
        except ValueError:
            return None

        user = await self.get_user_by_id(user_id)
        if user is None:
            return None

        return create_tokens_for_user(user_id=user.user_id, email=user.email)
