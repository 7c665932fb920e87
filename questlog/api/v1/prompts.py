"""
Writing Prompt Endpoints
========================
"""

from typing import Optional

from fastapi import APIRouter, Query

from questlog.schemas.common import DataResponse
from questlog.services.prompts import PROMPT_CATEGORIES, list_prompts

router = APIRouter()


@router.get(
    "",
    response_model=DataResponse,
)
async def get_prompts(
    category: Optional[str] = Query(default=None, max_length=50),
):
    """Prompts to start a new entry from."""
    return DataResponse(
        success=True,
        data={
            "prompts": list_prompts(category),
            "categories": list(PROMPT_CATEGORIES),
        },
    )
