"""Environment-based configuration loader using pydantic BaseSettings."""

from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings

from src.models.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Loaded once at startup (or a .env file) and passed to every component
    that needs it. Nothing reads the environment at import time.
    """

    # Notion workspace served by this bot. Required, but a missing value only
    # disables matching instead of stopping the process.
    notion_workspace: str = ""
    notion_domain: str = "notion.so"

    # Preview body limits
    summary_number_of_lines: int = Field(5, ge=1)
    summary_number_of_characters: int = Field(200, ge=2)

    # Notion REST API
    notion_api_token: str = ""
    notion_api_base_url: str = "https://api.notion.com/v1"
    notion_api_version: str = "2022-06-28"
    notion_timeout_seconds: float = 30.0
    notion_icon_url: str = "https://www.notion.so/front-static/favicon.ico"

    # Slack (Socket Mode needs the app-level token)
    slack_bot_token: str = ""
    slack_app_token: str = ""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


def get_settings() -> Settings:
    """Create and return a validated Settings instance."""
    return Settings()


def check_settings(settings: Settings) -> list[ConfigurationError]:
    """Log configuration problems that degrade the service without stopping it.

    Returns:
        The problems found, already logged at ERROR level.
    """
    problems: list[ConfigurationError] = []
    if not settings.notion_workspace:
        problems.append(
            ConfigurationError("NOTION_WORKSPACE is required; no Notion URL will be unfurled")
        )
    if not settings.notion_api_token:
        problems.append(ConfigurationError("NOTION_API_TOKEN is empty; Notion requests will fail"))

    for problem in problems:
        logger.error(str(problem))
    return problems
