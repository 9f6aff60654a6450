"""Shared fixtures for the unfurler test suite."""

from __future__ import annotations

import pytest

from src.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings built explicitly so tests never depend on the environment."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        notion_workspace="acme",
        notion_domain="notion.so",
        summary_number_of_lines=5,
        summary_number_of_characters=200,
        notion_api_token="secret_test",
        slack_bot_token="xoxb-test",
        slack_app_token="",
        debug=False,
    )
