"""
Profile API Endpoints
=====================

Handles profile retrieval, settings updates and level progress.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.db.session import get_db
from questlog.dependencies import CurrentProfile, CurrentUser
from questlog.schemas.common import DataResponse, ErrorResponse
from questlog.schemas.profile import ProfileUpdate
from questlog.services.cache import CacheInvalidator, CacheKeys, CacheManager
from questlog.services.gamification import level_progress
from questlog.services.profile_service import ProfileService, profile_to_dict

router = APIRouter()


@router.get(
    "",
    response_model=DataResponse,
)
async def get_profile(
    current_user: CurrentUser,
    profile: CurrentProfile,
):
    """
    Get the user's profile.

    Includes XP, level progress, streak and preferences.
    """
    user_id_str = str(current_user.user_id)

    cached = await CacheManager.get(CacheKeys.profile(user_id_str))
    if cached:
        return DataResponse(success=True, data=cached)

    data = profile_to_dict(profile)
    data["email"] = current_user.email

    await CacheManager.set(
        CacheKeys.profile(user_id_str),
        data,
        ttl=CacheManager.TTL_SHORT,
    )

    return DataResponse(success=True, data=data)


@router.put(
    "",
    response_model=DataResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid timezone"},
        409: {"model": ErrorResponse, "description": "Username taken"},
    },
)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: CurrentUser,
    profile: CurrentProfile,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Update profile settings.

    Only provided fields will be updated.
    """
    profile_service = ProfileService(db)
    profile = await profile_service.update_profile(profile, profile_data)
    await db.commit()

    await CacheInvalidator.on_profile_update(str(current_user.user_id))

    data = profile_to_dict(profile)
    data["email"] = current_user.email

    return DataResponse(
        success=True,
        data=data,
        message="Profile updated successfully",
    )


@router.get(
    "/level",
    response_model=DataResponse,
)
async def get_level(profile: CurrentProfile):
    """Level progress card: level, XP into the level and streak."""
    data = level_progress(profile.xp).to_dict()
    data["streak_count"] = profile.streak_count
    return DataResponse(success=True, data=data)
