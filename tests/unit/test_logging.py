"""Tests for request-scoped log context."""

import pytest

from admschool.core.logging import (
    add_context_info,
    clear_request_context,
    set_request_context,
    set_user_context,
)


@pytest.mark.unit
class TestRequestContext:
    """Tests for the request/user context processor."""

    def teardown_method(self) -> None:
        clear_request_context()

    def test_request_id_added(self) -> None:
        set_request_context("req-1")

        event = add_context_info(None, "info", {"event": "login_failed"})

        assert event["request_id"] == "req-1"
        assert "user_id" not in event

    def test_user_id_added_after_authentication(self) -> None:
        set_request_context("req-2")
        set_user_context("user-1")

        event = add_context_info(None, "info", {"event": "refresh_token_revoked"})

        assert event["user_id"] == "user-1"

    def test_explicit_user_id_wins(self) -> None:
        set_user_context("user-1")

        event = add_context_info(None, "info", {"event": "login_succeeded", "user_id": "user-2"})

        assert event["user_id"] == "user-2"

    def test_cleared_context(self) -> None:
        set_request_context("req-3")
        set_user_context("user-1")
        clear_request_context()

        event = add_context_info(None, "info", {"event": "tokens_issued"})

        assert event == {"event": "tokens_issued"}
