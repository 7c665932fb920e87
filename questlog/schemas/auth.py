"""
Authentication Schemas
======================

Pydantic schemas for authentication endpoints.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


USERNAME_PATTERN = re.compile(r"^[a-z0-9_.-]{3,50}$")


def username_from_name(name: str) -> str:
    """Default username: the display name lowercased with whitespace removed."""
    return re.sub(r"\s+", "", name).lower()


class UserRegister(BaseModel):
    """Request schema for user registration."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    full_name: str = Field(min_length=1, max_length=255)
    username: Optional[str] = Field(default=None, max_length=50)
    timezone: str = Field(default="UTC", max_length=50)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password strength."""
        if not any(c.isupper() for c in v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not any(c.islower() for c in v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not any(c.isdigit() for c in v):
            raise ValueError("Password must contain at least one number")
        return v

    @model_validator(mode="after")
    def default_username(self) -> "UserRegister":
        """Derive the username from the display name when not given."""
        username = (self.username or username_from_name(self.full_name)).lower()
        if not USERNAME_PATTERN.match(username):
            raise ValueError(
                "Username must be 3-50 characters of letters, digits, '.', '_' or '-'"
            )
        self.username = username
        return self


class UserLogin(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str


class RefreshTokenRequest(BaseModel):
    """Request schema for token refresh."""

    refresh_token: str


class TokenResponse(BaseModel):
    """Response schema for tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class AuthResponse(BaseModel):
    """Response schema for authentication endpoints."""

    success: bool = True
    data: dict[str, Any]
    message: Optional[str] = None
