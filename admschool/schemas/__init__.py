"""
Pydantic schemas for API responses and requests
"""

from admschool.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    TokenResponse,
    UserInfo,
)

__all__ = [
    "CurrentUserResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshRequest",
    "TokenResponse",
    "UserInfo",
]
