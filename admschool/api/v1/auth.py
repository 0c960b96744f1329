"""
Authentication API endpoints.

This module provides endpoints for:
- User login (JWT access token + opaque refresh token)
- Token refresh (with rotation)
- Logout (revoke refresh token)
- Current user info
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from admschool.core.auth import CurrentUser, TokenServiceDep
from admschool.core.database import get_db
from admschool.core.logging import get_logger
from admschool.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenResponse,
    UserInfo,
)
from admschool.services.users import authenticate_user, get_role_names

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    token_service: TokenServiceDep,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate user and return an access token + refresh token.

    Flow:
    1. Find active user by email
    2. Verify password against the bcrypt hash
    3. Load the user's roles
    4. Issue access token (JWT, 15 min) and refresh token (opaque, 7 days)
    5. Store refresh token in database

    Unknown email, inactive account and wrong password all produce the same 401.
    """
    user = await authenticate_user(db, credentials.email, credentials.password)

    if user is None:
        logger.info("login_failed")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    roles = await get_role_names(db, user.id)
    pair = await token_service.issue_tokens(user, roles)

    logger.info("login_succeeded", user_id=str(user.id))

    return LoginResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.expires_at,
        token_type=pair.token_type,
        user=UserInfo(id=user.id, name=user.name, email=user.email, roles=roles),
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request_data: RefreshRequest,
    token_service: TokenServiceDep,
) -> TokenResponse:
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token is revoked (rotation); presenting it again
    fails. Unknown, revoked and expired tokens all produce the same 401.
    """
    pair = await token_service.refresh_tokens(request_data.refresh_token)

    if pair is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    return TokenResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_at=pair.expires_at,
        token_type=pair.token_type,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def logout(
    request_data: RefreshRequest,
    current_user: CurrentUser,
    token_service: TokenServiceDep,
) -> Response:
    """
    Logout user by revoking their refresh token.

    Idempotent: logging out with an unknown or already revoked token still
    returns 204. The access token is not revoked and expires naturally.
    """
    await token_service.revoke_refresh_token(request_data.refresh_token, user_id=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    current_user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CurrentUserResponse:
    """
    Get current authenticated user information.
    """
    roles = await get_role_names(db, current_user.id)
    return CurrentUserResponse(
        id=current_user.id,
        name=current_user.name,
        email=current_user.email,
        is_active=current_user.is_active,
        roles=roles,
        created_at=current_user.created_at,
        updated_at=current_user.updated_at,
    )
