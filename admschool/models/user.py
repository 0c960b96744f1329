"""
SQLModel-based User models with inheritance for security

UserBase (shared public fields)
    └─> Users (database table, adds credential and status fields)

API response schemas live in admschool/schemas and never expose password_hash.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index
from sqlmodel import Field, SQLModel

from admschool.utils import utc_now


class UserBase(SQLModel):
    """
    Base model with shared public fields for Users.
    """

    name: str = Field(max_length=150)
    email: str = Field(max_length=256)


class Users(UserBase, table=True):
    """
    Database table for users.

    Internal/sensitive fields (should NOT be exposed via public API):
    - password_hash: bcrypt hash (highly sensitive)
    - is_active: access control
    """

    __tablename__ = "users"

    __table_args__ = (Index("ux_users_email", "email", unique=True),)

    # Primary key
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Authentication (highly sensitive - never expose)
    password_hash: str = Field(max_length=255)

    # Status
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
