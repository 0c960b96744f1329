"""
Security utilities for authentication.

This module provides:
- Password hashing and verification using bcrypt
- Access token (JWT) generation and verification
- Opaque refresh token generation
"""

import base64
import hashlib
import re
import secrets
import uuid
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any

import bcrypt
import jwt

from admschool.config import Settings
from admschool.utils import utc_now

REFRESH_TOKEN_BYTES = 64


def validate_password_strength(password: str) -> tuple[bool, str | None]:
    """
    Validate password meets security requirements.

    Requirements:
    - At least 8 characters
    - Contains at least one uppercase letter
    - Contains at least one lowercase letter
    - Contains at least one digit
    - Contains at least one special character

    Args:
        password: The password to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    if not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"

    if not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"

    if not re.search(r"\d", password):
        return False, "Password must contain at least one digit"

    if not re.search(r'[!@#$%^&*(),.?"\':{}|<>]', password):
        return False, "Password must contain at least one special character"

    return True, None


def _prepare_password_for_bcrypt(password: str) -> str:
    """
    Prepare password for bcrypt by handling long passwords.

    Bcrypt has a 72 byte limit. For passwords longer than 72 bytes,
    we SHA256 hash them first and encode as base64.

    Args:
        password: The plain text password

    Returns:
        Password ready for bcrypt (guaranteed <= 72 bytes)
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) <= 72:
        return password

    # SHA256 produces 32 bytes, base64 encoding produces 44 chars
    hashed = hashlib.sha256(password_bytes).digest()
    return base64.b64encode(hashed).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The bcrypt hashed password

    Returns:
        True if password matches, False otherwise (including malformed hashes)
    """
    prepared_password = _prepare_password_for_bcrypt(plain_password)
    try:
        return bcrypt.checkpw(prepared_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    For passwords longer than 72 bytes (bcrypt's limit), we SHA256 hash them first.

    Args:
        password: The plain text password to hash

    Returns:
        The bcrypt hashed password
    """
    prepared_password = _prepare_password_for_bcrypt(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(prepared_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def create_access_token(
    settings: Settings,
    user_id: uuid.UUID,
    email: str,
    name: str,
    roles: Iterable[str],
    expires_delta: timedelta | None = None,
) -> tuple[str, datetime]:
    """
    Create a signed JWT access token.

    Args:
        settings: Application settings (secret, issuer, audience, lifetime)
        user_id: The user ID, written to both "sub" and "userId"
        email: User email claim
        name: User display name claim
        roles: Role names, one entry in the "role" claim per role
        expires_delta: Optional custom lifetime (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Tuple of (encoded token, naive UTC expiry)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    issued_at = utc_now()
    expire = issued_at + expires_delta

    payload: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "jti": str(uuid.uuid4()),
        "userId": str(user_id),
        "role": list(roles),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        # Naive datetimes are encoded as UTC by PyJWT
        "iat": issued_at,
        "exp": expire,
    }

    encoded_jwt = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt, expire


def create_refresh_token() -> str:
    """
    Create an opaque refresh token.

    Returns:
        64 cryptographically random bytes, standard base64 encoded (88 characters)
    """
    return base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")


def decode_access_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """
    Verify and decode a JWT access token.

    Checks signature, algorithm, issuer, audience and expiry
    (with JWT_CLOCK_SKEW_SECONDS leeway).

    Args:
        token: The JWT token to verify
        settings: Application settings

    Returns:
        The claims if the token is valid, None otherwise
    """
    try:
        header = jwt.get_unverified_header(token)
        if header.get("alg") != settings.JWT_ALGORITHM:
            return None

        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
            leeway=settings.JWT_CLOCK_SKEW_SECONDS,
            options={"require": ["exp", "iss", "aud", "sub"]},
        )
    except jwt.PyJWTError:
        # Expired, bad signature, wrong issuer/audience, malformed
        return None


def get_user_id_from_claims(claims: dict[str, Any]) -> uuid.UUID | None:
    """Extract the "userId" claim as a UUID."""
    raw_user_id = claims.get("userId")
    if not isinstance(raw_user_id, str):
        return None
    try:
        return uuid.UUID(raw_user_id)
    except ValueError:
        return None
