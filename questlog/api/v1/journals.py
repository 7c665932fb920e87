"""
Journal API Endpoints
=====================

Handles journal entry CRUD, listing and search. Creating an entry also
awards XP, advances the streak and unlocks achievements.
"""

import logging
from typing import Annotated, Optional
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.config import settings
from questlog.db.session import get_db
from questlog.dependencies import CurrentProfile, CurrentUser
from questlog.models.journal import Mood
from questlog.schemas.common import DataResponse, ErrorResponse
from questlog.schemas.journal import JournalEntryCreate, JournalEntryUpdate
from questlog.services.cache import CacheInvalidator, CacheKeys, CacheManager
from questlog.services.journal_service import JournalService, entry_to_dict
from questlog.services.progress_service import ProgressService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=DataResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_journal_entry(
    entry_data: JournalEntryCreate,
    current_user: CurrentUser,
    profile: CurrentProfile,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Create a new journal entry.

    The response carries the XP earned, the new streak and any
    achievements unlocked by this entry.
    """
    journal_service = JournalService(db)
    progress_service = ProgressService(db)

    entry = await journal_service.create_entry(
        user_id=current_user.user_id,
        entry_data=entry_data,
    )
    progress = await progress_service.record_entry(profile, entry)
    await db.commit()

    user_id_str = str(current_user.user_id)
    await CacheInvalidator.on_journal_change(user_id_str)
    await CacheInvalidator.on_progress_change(user_id_str)

    return DataResponse(
        success=True,
        data={
            "entry": entry_to_dict(entry),
            "progress": progress.to_dict(),
        },
        message="Journal entry created successfully",
    )


@router.get(
    "",
    response_model=DataResponse,
)
async def get_journal_entries(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    search: Optional[str] = Query(default=None, max_length=200),
    mood: Optional[Mood] = None,
    tag: Optional[str] = Query(default=None, max_length=50),
):
    """
    Get paginated list of journal entries, newest first.

    Supports searching title and content, and filtering by mood or tag.
    """
    journal_service = JournalService(db)

    result = await journal_service.get_entries_paginated(
        user_id=current_user.user_id,
        page=page,
        limit=limit,
        search=search.strip() if search else None,
        mood_filter=mood,
        tag=tag,
    )

    return DataResponse(
        success=True,
        data={
            "entries": [entry_to_dict(e) for e in result["entries"]],
            "pagination": result["pagination"].model_dump(),
        },
    )


@router.get(
    "/recent",
    response_model=DataResponse,
)
async def get_recent_entries(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Optional[int] = Query(default=None, ge=1, le=50),
):
    """Latest entries for the dashboard."""
    journal_service = JournalService(db)

    entries = await journal_service.get_recent_entries(
        current_user.user_id,
        limit=limit or settings.RECENT_JOURNALS_LIMIT,
    )

    return DataResponse(
        success=True,
        data={"entries": [entry_to_dict(e) for e in entries]},
    )


@router.get(
    "/{entry_id}",
    response_model=DataResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Entry not found"},
    },
)
async def get_journal_entry(
    entry_id: uuid.UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Get a single journal entry.
    """
    user_id_str = str(current_user.user_id)
    cache_key = CacheKeys.journal_entry(user_id_str, str(entry_id))

    cached = await CacheManager.get(cache_key)
    if cached:
        return DataResponse(success=True, data=cached)

    journal_service = JournalService(db)
    entry = await journal_service.get_owned_entry(entry_id, current_user.user_id)

    data = entry_to_dict(entry)
    await CacheManager.set(cache_key, data, ttl=CacheManager.TTL_LONG)

    return DataResponse(success=True, data=data)


@router.put(
    "/{entry_id}",
    response_model=DataResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Entry not found"},
    },
)
async def update_journal_entry(
    entry_id: uuid.UUID,
    entry_data: JournalEntryUpdate,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Update a journal entry.

    Only provided fields will be updated. Edits earn no XP.
    """
    journal_service = JournalService(db)

    entry = await journal_service.get_owned_entry(entry_id, current_user.user_id)
    entry = await journal_service.update_entry(entry, entry_data)
    await db.commit()

    await CacheInvalidator.on_journal_change(
        str(current_user.user_id),
        str(entry_id),
    )

    return DataResponse(
        success=True,
        data=entry_to_dict(entry),
        message="Journal entry updated successfully",
    )


@router.delete(
    "/{entry_id}",
    response_model=DataResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Entry not found"},
    },
)
async def delete_journal_entry(
    entry_id: uuid.UUID,
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Delete a journal entry.

    XP, streak and achievements already earned are kept.
    """
    journal_service = JournalService(db)

    entry = await journal_service.get_owned_entry(entry_id, current_user.user_id)
    await journal_service.delete_entry(entry)
    await db.commit()

    await CacheInvalidator.on_journal_change(
        str(current_user.user_id),
        str(entry_id),
    )
    logger.info("Deleted journal entry %s for user %s", entry_id, current_user.user_id)

    return DataResponse(
        success=True,
        data={"entry_id": str(entry_id)},
        message="Journal entry deleted successfully",
    )
