"""
Authentication schemas for request/response validation.

This module defines Pydantic models for authentication-related API operations:
- Login credentials
- Token pair responses
- Refresh/logout requests
- Current user info
"""

import uuid

from pydantic import Field

from admschool.schemas.base import CamelModel, UTCDatetime


class LoginRequest(CamelModel):
    """Request schema for user login."""

    email: str = Field(..., min_length=3, max_length=256)
    password: str = Field(..., min_length=1, max_length=255)


class RefreshRequest(CamelModel):
    """Request schema for token refresh and logout."""

    refresh_token: str = Field(..., min_length=1, max_length=512)


class TokenResponse(CamelModel):
    """Response schema for a new access/refresh token pair."""

    access_token: str
    refresh_token: str
    expires_at: UTCDatetime = Field(..., description="Access token expiry (UTC)")
    token_type: str = "Bearer"


class UserInfo(CamelModel):
    """Identity summary returned with a login."""

    id: uuid.UUID
    name: str
    email: str
    roles: list[str] = Field(default_factory=list)


class LoginResponse(TokenResponse):
    """Response schema for successful authentication."""

    user: UserInfo


class CurrentUserResponse(CamelModel):
    """Response schema for GET /auth/me."""

    id: uuid.UUID
    name: str
    email: str
    is_active: bool
    roles: list[str] = Field(default_factory=list)
    created_at: UTCDatetime
    updated_at: UTCDatetime
