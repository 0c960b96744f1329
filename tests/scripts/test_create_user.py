"""Tests for the create_user seeding script."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from admschool.config import Settings
from admschool.core.security import verify_password
from admschool.services.users import get_role_names, get_user_by_email
from scripts.create_user import main

TEST_PASSWORD = "Secret@123"


@pytest.fixture
def script_settings(engine, tmp_path) -> Settings:
    """Settings pointing at the per-test database file (tables already created)."""
    return Settings(
        JWT_SECRET_KEY="script-secret-key-with-at-least-32-chars",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    )


class TestCreateUserScript:
    """Tests for scripts/create_user.py."""

    async def test_creates_user_with_roles(
        self, script_settings: Settings, db_session: AsyncSession
    ) -> None:
        exit_code = await main(
            [
                "--name", "Bo Teacher",
                "--email", "bo@test.com",
                "--role", "Teacher",
                "--role", "User",
                "--password", TEST_PASSWORD,
            ],
            settings=script_settings,
        )

        assert exit_code == 0
        user = await get_user_by_email(db_session, "bo@test.com")
        assert user is not None
        assert user.name == "Bo Teacher"
        assert user.is_active is True
        assert verify_password(TEST_PASSWORD, user.password_hash)
        assert await get_role_names(db_session, user.id) == ["Teacher", "User"]

    async def test_default_role_and_inactive_flag(
        self, script_settings: Settings, db_session: AsyncSession
    ) -> None:
        exit_code = await main(
            ["--name", "Ivo", "--email", "ivo@test.com", "--password", TEST_PASSWORD, "--inactive"],
            settings=script_settings,
        )

        assert exit_code == 0
        user = await get_user_by_email(db_session, "ivo@test.com")
        assert user is not None
        assert user.is_active is False
        assert await get_role_names(db_session, user.id) == ["User"]

    async def test_weak_password_rejected(
        self, script_settings: Settings, db_session: AsyncSession, capsys
    ) -> None:
        exit_code = await main(
            ["--name", "Weak", "--email", "weak@test.com", "--password", "password"],
            settings=script_settings,
        )

        assert exit_code == 1
        assert "ERROR" in capsys.readouterr().out
        assert await get_user_by_email(db_session, "weak@test.com") is None

    async def test_duplicate_email_rejected(
        self, script_settings: Settings, active_user, capsys
    ) -> None:
        exit_code = await main(
            ["--name", "Copy", "--email", "a@test.com", "--password", TEST_PASSWORD],
            settings=script_settings,
        )

        assert exit_code == 1
        assert "Email already registered" in capsys.readouterr().out
