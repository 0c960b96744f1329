"""
Token service: issue, rotate and revoke access/refresh token pairs.

Access tokens are short-lived signed JWTs. Refresh tokens are opaque
random strings stored in the refresh_tokens table and are single use:
refreshing revokes the presented token and issues a new pair.

Revocation is a conditional UPDATE (``WHERE revoked = false AND
expires_at > now``) whose affected row count decides the winner, so a
refresh token can never be redeemed twice, even by concurrent requests.
"""

import uuid
from datetime import datetime, timedelta

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from admschool.config import Settings
from admschool.core.logging import get_logger
from admschool.core.security import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_user_id_from_claims,
)
from admschool.models.refresh_token import RefreshTokens
from admschool.models.user import Users
from admschool.services.users import get_role_names, get_user_by_id
from admschool.utils import utc_now

logger = get_logger(__name__)


class TokenPair(BaseModel):
    """Result of a successful login or refresh."""

    access_token: str
    refresh_token: str
    expires_at: datetime  # Access token expiry (naive UTC)
    token_type: str = "Bearer"


class TokenService:
    """
    Issues and rotates tokens against one database session.

    Args:
        db: Database session; the service commits its own changes
        settings: Signing key, issuer/audience and token lifetimes
    """

    def __init__(self, db: AsyncSession, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    async def issue_tokens(self, user: Users, roles: list[str] | None = None) -> TokenPair:
        """
        Mint an access token and persist a new refresh token for a user.

        Args:
            user: Authenticated user
            roles: The user's role names (loaded from the database if omitted)

        Returns:
            New token pair
        """
        pair = await self._issue(user, roles)
        await self.db.commit()

        logger.info("tokens_issued", user_id=str(user.id))
        return pair

    async def refresh_tokens(self, refresh_token: str) -> TokenPair | None:
        """
        Exchange an active refresh token for a new pair (rotation).

        The presented token is revoked and the new refresh token inserted in
        one transaction.

        Args:
            refresh_token: Opaque refresh token from the client

        Returns:
            New token pair, or None if the token is unknown, revoked or
            expired, or its user is gone or inactive
        """
        now = utc_now()

        if not await self._revoke_if_active(refresh_token, now):
            logger.info("refresh_token_rejected")
            return None

        result = await self.db.execute(
            select(RefreshTokens).where(RefreshTokens.token == refresh_token)  # type: ignore[arg-type]
        )
        stored_token = result.scalar_one()

        user = await get_user_by_id(self.db, stored_token.user_id)
        if user is None or not user.is_active:
            # The presented token stays consumed
            await self.db.commit()
            logger.info("refresh_token_rejected", user_id=str(stored_token.user_id))
            return None

        pair = await self._issue(user)
        await self.db.commit()

        logger.info(
            "refresh_token_rotated",
            user_id=str(user.id),
            previous_token_id=str(stored_token.id),
        )
        return pair

    async def revoke_refresh_token(
        self, refresh_token: str, user_id: uuid.UUID | None = None
    ) -> bool:
        """
        Revoke a refresh token (logout).

        Idempotent: an unknown, already revoked or expired token is a no-op.

        Args:
            refresh_token: Opaque refresh token from the client
            user_id: If given, only a token owned by this user is revoked

        Returns:
            True if a token was revoked by this call
        """
        revoked = await self._revoke_if_active(refresh_token, utc_now(), user_id=user_id)
        await self.db.commit()

        if revoked:
            logger.info("refresh_token_revoked", user_id=str(user_id) if user_id else None)
        else:
            logger.debug("refresh_token_revoke_noop")
        return revoked

    def validate_access_token(self, access_token: str) -> uuid.UUID | None:
        """
        Validate an access token and return its user ID.

        Returns:
            The "userId" claim, or None if the token is invalid or expired
        """
        claims = decode_access_token(access_token, self.settings)
        if claims is None:
            return None
        return get_user_id_from_claims(claims)

    async def _issue(self, user: Users, roles: list[str] | None = None) -> TokenPair:
        """Build a token pair and stage its refresh token row. Caller commits."""
        if roles is None:
            roles = await get_role_names(self.db, user.id)

        access_token, expires_at = create_access_token(
            self.settings,
            user_id=user.id,
            email=user.email,
            name=user.name,
            roles=roles,
        )

        refresh_token = create_refresh_token()
        self.db.add(
            RefreshTokens(
                user_id=user.id,
                token=refresh_token,
                expires_at=utc_now() + timedelta(days=self.settings.REFRESH_TOKEN_EXPIRE_DAYS),
            )
        )
        await self.db.flush()

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
        )

    async def _revoke_if_active(
        self,
        refresh_token: str,
        now: datetime,
        user_id: uuid.UUID | None = None,
    ) -> bool:
        """
        Atomically flip an active token to revoked.

        Returns:
            True if exactly this call revoked the token
        """
        stmt = (
            update(RefreshTokens)
            .where(
                RefreshTokens.token == refresh_token,  # type: ignore[arg-type]
                RefreshTokens.revoked == False,  # type: ignore[arg-type]  # noqa: E712
                RefreshTokens.expires_at > now,  # type: ignore[arg-type]
            )
            .values(revoked=True, revoked_at=now)
        )
        if user_id is not None:
            stmt = stmt.where(RefreshTokens.user_id == user_id)  # type: ignore[arg-type]

        result = await self.db.execute(stmt)
        return (result.rowcount or 0) == 1  # type: ignore[attr-defined]
