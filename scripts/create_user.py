#!/usr/bin/env python3
"""
Create a user who can log in to the API.

User management endpoints live in the main application; this script seeds
accounts (typically the first administrator) directly in the database.

Usage:
    # Prompt for the password
    python scripts/create_user.py --name "Ada Admin" --email admin@school.test --role Admin

    # Several roles, password from the command line
    python scripts/create_user.py --name "Bo Teacher" --email bo@school.test \\
        --role User --role Teacher --password 'Secret@123'
"""

import argparse
import asyncio
import getpass
import sys

from admschool.config import Settings, get_settings
from admschool.core.database import build_engine, build_sessionmaker
from admschool.core.security import validate_password_strength
from admschool.services.users import create_user


async def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    """
    Parse arguments and create the user.

    Returns:
        Process exit code (0 on success)
    """
    parser = argparse.ArgumentParser(description="Create an API user with roles")
    parser.add_argument("--name", required=True, help="Display name")
    parser.add_argument("--email", required=True, help="Login email (case-sensitive)")
    parser.add_argument(
        "--role",
        action="append",
        dest="roles",
        default=None,
        help="Role name, repeatable (default: User)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password (prompted for when omitted)",
    )
    parser.add_argument(
        "--inactive",
        action="store_true",
        help="Create the account disabled",
    )

    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    is_valid, error_message = validate_password_strength(password)
    if not is_valid:
        print(f"\nERROR: {error_message}")
        return 1

    if settings is None:
        settings = get_settings()
    engine = build_engine(settings)
    async_session = build_sessionmaker(engine)

    try:
        async with async_session() as db:
            try:
                user = await create_user(
                    db,
                    name=args.name,
                    email=args.email,
                    password=password,
                    roles=args.roles or ["User"],
                    is_active=not args.inactive,
                )
            except ValueError as e:
                print(f"\nERROR: {e}")
                return 1
            await db.commit()

            print(f"✓ Created user {user.email} ({user.id})")
    finally:
        await engine.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
