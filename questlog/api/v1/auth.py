"""
Authentication API Endpoints
============================

Handles user registration, login, token refresh and the current user.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from questlog.core.errors import AuthenticationError, ConflictError, ErrorCodes
from questlog.core.security import create_tokens_for_user
from questlog.db.session import get_db
from questlog.dependencies import CurrentProfile, CurrentUser
from questlog.schemas.auth import (
    AuthResponse,
    RefreshTokenRequest,
    UserLogin,
    UserRegister,
)
from questlog.schemas.common import ErrorResponse
from questlog.services.auth_service import AuthService
from questlog.services.profile_service import profile_to_dict

logger = logging.getLogger(__name__)

router = APIRouter()


def user_to_dict(user) -> dict:
    return {
        "user_id": str(user.user_id),
        "email": user.email,
        "created_at": user.created_at.isoformat() if user.created_at else None,
        "last_login": user.last_login.isoformat() if user.last_login else None,
    }


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email or username taken"},
    },
)
async def register(
    user_data: UserRegister,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Register a new user account.

    Creates the profile automatically, starting at level 1.
    """
    auth_service = AuthService(db)

    existing_user = await auth_service.get_user_by_email(user_data.email)
    if existing_user is not None:
        raise ConflictError(
            code=ErrorCodes.AUTH_EMAIL_EXISTS,
            message="Email already registered",
            field="email",
        )

    if await auth_service.username_taken(user_data.username):
        raise ConflictError(
            code=ErrorCodes.PROFILE_USERNAME_TAKEN,
            message="Username is already taken",
            field="username",
        )

    user = await auth_service.create_user(user_data)

    tokens = create_tokens_for_user(user_id=user.user_id, email=user.email)

    return AuthResponse(
        success=True,
        data={
            "user": user_to_dict(user),
            "profile": profile_to_dict(user.profile),
            "tokens": tokens,
        },
        message="Account created successfully",
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(
    credentials: UserLogin,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Authenticate user and return tokens.
    """
    auth_service = AuthService(db)

    user = await auth_service.authenticate_user(
        email=credentials.email,
        password=credentials.password,
    )

    if user is None:
        logger.info("Failed login for %s", credentials.email)
        raise AuthenticationError(
            code=ErrorCodes.AUTH_INVALID_CREDENTIALS,
            message="Invalid credentials",
        )

    tokens = create_tokens_for_user(user_id=user.user_id, email=user.email)

    return AuthResponse(
        success=True,
        data={
            "user": user_to_dict(user),
            "profile": profile_to_dict(user.profile) if user.profile else None,
            "tokens": tokens,
        },
    )


@router.post(
    "/refresh",
    response_model=AuthResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid refresh token"},
    },
)
async def refresh(
    request: RefreshTokenRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Exchange a refresh token for a new token pair.
    """
    auth_service = AuthService(db)

    tokens = await auth_service.refresh_tokens(request.refresh_token)
    if tokens is None:
        raise AuthenticationError(
            code=ErrorCodes.AUTH_INVALID_TOKEN,
            message="Invalid or expired refresh token",
        )

    return AuthResponse(success=True, data={"tokens": tokens})


@router.get(
    "/me",
    response_model=AuthResponse,
)
async def me(
    current_user: CurrentUser,
    profile: CurrentProfile,
):
    """Current user with their profile."""
    return AuthResponse(
        success=True,
        data={
            "user": user_to_dict(current_user),
            "profile": profile_to_dict(profile),
        },
    )
