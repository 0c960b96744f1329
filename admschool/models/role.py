"""
SQLModel-based Role models

- Roles: named roles (e.g. "Admin", "User")
- UserRoles: junction table linking users to roles
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from admschool.utils import utc_now

# ===== Roles =====


class RoleBase(SQLModel):
    """
    Base model with shared public fields for Roles.
    """

    name: str = Field(max_length=100)
    description: str | None = Field(default=None, max_length=250)


class Roles(RoleBase, table=True):
    """
    Database table for roles.

    Role names end up as "role" claims in issued access tokens.
    """

    __tablename__ = "roles"

    __table_args__ = (Index("ux_roles_name", "name", unique=True),)

    # Primary key
    id: int | None = Field(default=None, primary_key=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())


# ===== UserRoles (Junction Table) =====


class UserRoles(SQLModel, table=True):
    """
    Database table linking users to roles.

    This is a simple junction table with a composite primary key.
    """

    __tablename__ = "user_roles"

    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="fk_user_roles_user_id",
        ),
        ForeignKeyConstraint(
            ["role_id"],
            ["roles.id"],
            ondelete="CASCADE",
            name="fk_user_roles_role_id",
        ),
        Index("ix_user_roles_role_id", "role_id"),
    )

    user_id: uuid.UUID = Field(primary_key=True)
    role_id: int = Field(primary_key=True)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime())
