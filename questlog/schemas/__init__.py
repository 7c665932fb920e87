"""
Pydantic Schemas
================

Request/response schemas for API validation.
"""

from questlog.schemas.common import (
    BaseResponse,
    DataResponse,
    ErrorResponse,
    PaginationMeta,
)

__all__ = [
    "BaseResponse",
    "DataResponse",
    "ErrorResponse",
    "PaginationMeta",
]
