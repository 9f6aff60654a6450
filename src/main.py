"""FastAPI application entry point for the Notion link unfurler.

The HTTP surface only serves health checks; Slack events arrive over a
Socket Mode connection opened in the lifespan handler.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from src.config import Settings, check_settings, get_settings
from src.logging_config import setup_logging
from src.services.markdown import PageMarkdownExporter
from src.services.notion_client import NotionClient
from src.services.renderer import PreviewRenderer
from src.services.slack import LinkSharedListener, SlackGateway, build_socket_client
from src.services.unfurl import UnfurlService

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def build_listener(settings: Settings, web_client: AsyncWebClient) -> LinkSharedListener:
    """Wire the unfurl pipeline from settings."""
    notion = NotionClient.from_settings(settings)
    renderer = PreviewRenderer(settings, notion, PageMarkdownExporter(notion))
    gateway = SlackGateway(web_client)
    service = UnfurlService(settings, gateway, renderer)
    return LinkSharedListener(service, gateway)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    setup_logging(settings.effective_log_level)
    check_settings(settings)
    logger.info("Notion unfurler starting up")

    app.state.settings = settings
    web_client = AsyncWebClient(token=settings.slack_bot_token)
    listener = build_listener(settings, web_client)

    socket_client = None
    if settings.slack_app_token:
        socket_client = build_socket_client(settings, web_client, listener)
        try:
            await socket_client.connect()
            logger.info("Socket Mode connection established")
        except (SlackApiError, aiohttp.ClientError, TimeoutError):
            # Keep serving health checks; events are not received until restart
            logger.exception("Could not open Socket Mode connection")
            await socket_client.close()
            socket_client = None
    else:
        logger.error("SLACK_APP_TOKEN is empty; not connecting to Slack")
    app.state.socket_client = socket_client

    yield

    if socket_client is not None:
        await socket_client.close()
    logger.info("Notion unfurler shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Notion Link Unfurler",
        version=VERSION,
        description="Slack bot that unfurls Notion page and database links",
        lifespan=lifespan,
    )

    @application.get("/")
    async def root() -> dict:
        """Root endpoint with service info."""
        return {
            "name": "Notion Link Unfurler",
            "version": VERSION,
            "health": "/health-check",
        }

    @application.get("/health-check", response_class=PlainTextResponse)
    async def health_check() -> str:
        """Liveness check."""
        return "OK"

    return application


app = create_app()
