"""
User queries and credential verification.

Explicit query functions per entity, used by the auth routes, the token
service and the user seeding script.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from admschool.core.logging import get_logger
from admschool.core.security import get_password_hash, verify_password
from admschool.models.role import Roles, UserRoles
from admschool.models.user import Users

logger = get_logger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> Users | None:
    """Find a user by exact (case-sensitive) email."""
    result = await db.execute(select(Users).where(Users.email == email))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: uuid.UUID) -> Users | None:
    result = await db.execute(select(Users).where(Users.id == user_id))  # type: ignore[arg-type]
    return result.scalar_one_or_none()


async def email_exists(
    db: AsyncSession, email: str, exclude_id: uuid.UUID | None = None
) -> bool:
    """
    Check whether an email is already registered.

    Args:
        db: Database session
        email: Email to look up
        exclude_id: Ignore this user (for updates of the user's own record)
    """
    user = await get_user_by_email(db, email)
    if user is None:
        return False
    return exclude_id is None or user.id != exclude_id


async def get_role_names(db: AsyncSession, user_id: uuid.UUID) -> list[str]:
    """
    Fetch the role names assigned to a user, sorted by name.

    Args:
        db: Database session
        user_id: User to fetch roles for

    Returns:
        List of role names (empty if the user has no roles)
    """
    query = (
        select(Roles.name)
        .join(UserRoles, UserRoles.role_id == Roles.id)  # type: ignore[arg-type]
        .where(UserRoles.user_id == user_id)  # type: ignore[arg-type]
        .order_by(Roles.name)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def authenticate_user(db: AsyncSession, email: str, password: str) -> Users | None:
    """
    Verify submitted credentials.

    Returns None (never raises) when no user has this email, the user is
    inactive, or the password does not match the stored bcrypt hash.

    Args:
        db: Database session
        email: Submitted email (matched exactly)
        password: Submitted plaintext password

    Returns:
        The user on a hash match, None otherwise
    """
    user = await get_user_by_email(db, email)

    if user is None or not user.is_active:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


async def assign_roles(db: AsyncSession, user_id: uuid.UUID, role_names: Iterable[str]) -> None:
    """
    Replace a user's roles with the given role names.

    Missing roles are created. Caller must commit.
    """
    names = sorted(set(role_names))

    existing = await db.execute(select(Roles).where(Roles.name.in_(names)))  # type: ignore[union-attr]
    roles_by_name = {role.name: role for role in existing.scalars().all()}

    for name in names:
        if name not in roles_by_name:
            role = Roles(name=name)
            db.add(role)
            roles_by_name[name] = role
    await db.flush()

    current = await db.execute(select(UserRoles).where(UserRoles.user_id == user_id))  # type: ignore[arg-type]
    for link in current.scalars().all():
        await db.delete(link)
    await db.flush()

    for name in names:
        role_id = roles_by_name[name].id
        if role_id is None:
            raise ValueError(f"Role {name!r} has no ID after flush")
        db.add(UserRoles(user_id=user_id, role_id=role_id))
    await db.flush()


async def create_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    roles: Iterable[str] = ("User",),
    is_active: bool = True,
) -> Users:
    """
    Create a user with a bcrypt-hashed password and the given roles.

    Raises:
        ValueError: If the email is already registered

    Note: Caller must commit.
    """
    role_names = sorted(set(roles))

    if await email_exists(db, email):
        raise ValueError(f"Email already registered: {email}")

    user = Users(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        is_active=is_active,
    )
    db.add(user)
    await db.flush()

    await assign_roles(db, user.id, role_names)

    logger.info("user_created", user_id=str(user.id), roles=role_names)
    return user
