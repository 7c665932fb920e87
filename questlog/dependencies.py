"""
Common Dependencies
===================

Shared dependencies used across the application.
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional
import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.config import settings
from questlog.core.errors import AuthenticationError, ErrorCodes
from questlog.core.security import decode_token
from questlog.db.session import get_db
from questlog.models.profile import Profile
from questlog.models.user import User
from questlog.services.auth_service import AuthService
from questlog.services.profile_service import ProfileService

logger = logging.getLogger(__name__)

# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Security scheme for JWT authentication
security = HTTPBearer(auto_error=False)

# Development test user ID (consistent UUID for testing)
DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
DEV_USER_EMAIL = "dev@test.local"
DEV_USERNAME = "devuser"


async def get_or_create_dev_user(db: AsyncSession) -> User:
    """
    Get or create a development test user with its profile.
    Only used when DEV_AUTH_DISABLED is True.
    """
    result = await db.execute(
        select(User).where(User.user_id == DEV_USER_ID)
    )
    user = result.scalar_one_or_none()

    if user is None:
        now = datetime.now(timezone.utc)
        user = User(
            user_id=DEV_USER_ID,
            email=DEV_USER_EMAIL,
            created_at=now,
            updated_at=now,
        )
        user.profile = Profile(
            user_id=DEV_USER_ID,
            username=DEV_USERNAME,
            full_name="Development User",
            timezone="UTC",
            created_at=now,
            updated_at=now,
        )
        db.add(user)
        await db.commit()
        logger.info("Created development user %s", DEV_USER_ID)

    return user


async def _resolve_user_from_token(
    credentials: HTTPAuthorizationCredentials,
    db: AsyncSession,
) -> Optional[User]:
    """Decode the access token and load its user."""
    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        return None

    user_id_str = payload.get("sub")
    if user_id_str is None:
        return None

    try:
        user_id = uuid.UUID(user_id_str)
    except ValueError:
        return None

    auth_service = AuthService(db)
    return await auth_service.get_user_by_id(user_id)


async def get_current_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: DBSession,
) -> User:
    """
    Get current authenticated user.

    Raises 401 if not authenticated or token is invalid.
    In development with DEV_AUTH_DISABLED=True, returns the dev user.
    """
    if settings.auth_disabled:
        user = await get_or_create_dev_user(db)
        request.state.user_id = user.user_id
        return user

    if credentials is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_TOKEN_EXPIRED,
            message="Not authenticated",
        )

    user = await _resolve_user_from_token(credentials, db)

    if user is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_INVALID_TOKEN,
            message="Invalid or expired token",
        )

    request.state.user_id = user.user_id
    return user


async def get_current_profile(
    current_user: Annotated[User, Depends(get_current_user)],
    db: DBSession,
) -> Profile:
    """Profile of the current user, attached to the request session."""
    profile_service = ProfileService(db)
    return await profile_service.get_profile(current_user.user_id)


# Type aliases for authenticated dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentProfile = Annotated[Profile, Depends(get_current_profile)]
