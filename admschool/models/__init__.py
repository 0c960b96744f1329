"""
SQLModel table models.

Importing this package registers every table with SQLModel.metadata, which
Alembic and the test suite use as the schema source.
"""

from admschool.models.refresh_token import RefreshTokens
from admschool.models.role import Roles, UserRoles
from admschool.models.user import Users

__all__ = [
    "Users",
    "Roles",
    "UserRoles",
    "RefreshTokens",
]
