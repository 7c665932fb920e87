"""
Journal Schemas
===============

Pydantic schemas for journal entry endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from questlog.models.journal import Mood

MAX_TAGS = 20
MAX_TAG_LENGTH = 50


def clean_tags(tags: list[str]) -> list[str]:
    """Strip tags, drop empties and duplicates, keep first-seen order."""
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags are allowed")
    if any(len(tag) > MAX_TAG_LENGTH for tag in cleaned):
        raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
    return cleaned


class JournalEntryCreate(BaseModel):
    """Request schema for creating a journal entry."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(default="", max_length=100_000)
    mood: Optional[Mood] = None
    tags: list[str] = Field(default_factory=list)
    is_private: bool = True

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        return clean_tags(v)


class JournalEntryUpdate(BaseModel):
    """Request schema for editing a journal entry. Omitted fields are kept."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, max_length=100_000)
    mood: Optional[Mood] = None
    tags: Optional[list[str]] = None
    is_private: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        return clean_tags(v)
