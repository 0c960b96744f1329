"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Building the token service for a request
- Extracting and verifying bearer access tokens
- Loading the current user from the database
"""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from admschool.config import Settings
from admschool.core.database import get_db
from admschool.core.logging import set_user_context
from admschool.models.user import Users
from admschool.services.tokens import TokenService
from admschool.services.users import get_user_by_id

# auto_error=False so a missing header yields our 401 instead of FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with (see create_app)."""
    return request.app.state.settings


def get_token_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> TokenService:
    """Token service bound to the request's database session."""
    return TokenService(db, settings)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> uuid.UUID:
    """
    Extract and verify the bearer access token.

    Args:
        credentials: Authorization header credentials
        token_service: Token service used to validate the token

    Returns:
        User ID from the token's "userId" claim

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")

    user_id = token_service.validate_access_token(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    return user_id


async def get_current_user(
    user_id: Annotated[uuid.UUID, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Users:
    """
    Load current user from database using verified token.

    Raises:
        HTTPException: 401 if user not found or inactive
    """
    user = await get_user_by_id(db, user_id)

    if user is None or not user.is_active:
        raise _unauthorized("Could not validate credentials")

    set_user_context(str(user.id))
    return user


# Type aliases for dependency injection
CurrentUser = Annotated[Users, Depends(get_current_user)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
