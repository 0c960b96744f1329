"""
SQLModel-based RefreshToken model for JWT authentication.

Refresh tokens are opaque random strings exchanged for a new access/refresh
pair. Each token is single use: a refresh revokes the presented row and
inserts a new one. Rows are revoked, never deleted, so the table doubles
as an audit trail of sessions.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from admschool.utils import utc_now


class RefreshTokens(SQLModel, table=True):
    """
    Database table for refresh tokens.

    A token is active while it is not revoked and not past expires_at.
    Expiry is checked at use time; only revocation is stored.
    """

    __tablename__ = "refresh_tokens"

    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_refresh_tokens_user_id",
        ),
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ux_refresh_tokens_token", "token", unique=True),
    )

    # Primary key
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Owning user
    user_id: uuid.UUID

    # Opaque token (base64 of 64 random bytes)
    token: str = Field(max_length=512)

    # Expiration
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    expires_at: datetime = Field(sa_type=DateTime())

    # Revocation
    revoked: bool = Field(default=False)
    revoked_at: datetime | None = Field(default=None, sa_type=DateTime())

    def is_active(self, now: datetime | None = None) -> bool:
        """
        Active means neither revoked nor expired.

        Mirrors the WHERE clause TokenService uses to revoke a token
        atomically; the service never loads a row just to call this.
        """
        if now is None:
            now = utc_now()
        return not self.revoked and self.expires_at > now
