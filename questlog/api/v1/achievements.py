"""
Achievement API Endpoints
=========================

Lists every achievement with the user's unlock status.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.db.session import get_db
from questlog.dependencies import CurrentUser
from questlog.schemas.common import DataResponse
from questlog.services.achievement_service import AchievementService
from questlog.services.cache import CacheKeys, CacheManager

router = APIRouter()


@router.get(
    "",
    response_model=DataResponse,
)
async def get_achievements(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Every achievement, marked locked or unlocked with its unlock date.
    """
    user_id_str = str(current_user.user_id)

    cached = await CacheManager.get(CacheKeys.achievements(user_id_str))
    if cached:
        return DataResponse(success=True, data=cached)

    achievement_service = AchievementService(db)
    statuses = await achievement_service.get_statuses(current_user.user_id)

    data = {
        "achievements": [s.to_dict() for s in statuses],
        "unlocked_count": sum(1 for s in statuses if s.unlocked),
        "total": len(statuses),
    }

    await CacheManager.set(
        CacheKeys.achievements(user_id_str),
        data,
        ttl=CacheManager.TTL_HOUR,
    )

    return DataResponse(success=True, data=data)
