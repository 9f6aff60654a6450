"""Slack integration: Web API calls and the Socket Mode event listener."""

from __future__ import annotations

import logging

import aiohttp
from pydantic import ValidationError
from slack_sdk.errors import SlackApiError
from slack_sdk.socket_mode.aiohttp import SocketModeClient
from slack_sdk.socket_mode.request import SocketModeRequest
from slack_sdk.socket_mode.response import SocketModeResponse
from slack_sdk.web.async_client import AsyncWebClient

from src.config import Settings
from src.models.document import PreviewCard
from src.models.slack import ConversationInfo, ShareEvent
from src.services.unfurl import UnfurlService

logger = logging.getLogger(__name__)


class SlackGateway:
    """Thin wrapper over the Slack Web API calls the unfurler makes."""

    def __init__(self, client: AsyncWebClient) -> None:
        self._client = client

    async def get_conversation(self, channel_id: str) -> ConversationInfo:
        """Fetch the conversation's sharing flags via ``conversations.info``.

        Raises:
            SlackApiError: If Slack rejects the call.
        """
        response = await self._client.conversations_info(channel=channel_id)
        return ConversationInfo.model_validate(response["channel"])

    async def post_unfurls(
        self,
        channel: str,
        message_ts: str,
        unfurls: dict[str, PreviewCard],
    ) -> None:
        """Attach the preview cards to the original message via ``chat.unfurl``.

        Raises:
            SlackApiError: If Slack rejects the call.
        """
        await self._client.chat_unfurl(
            channel=channel,
            ts=message_ts,
            unfurls={url: card.to_attachment() for url, card in unfurls.items()},
        )


class LinkSharedListener:
    """Socket Mode listener that answers ``link_shared`` events with unfurls.

    Every envelope is acknowledged before any Notion work starts so Slack
    does not redeliver it.
    """

    def __init__(self, service: UnfurlService, gateway: SlackGateway) -> None:
        self._service = service
        self._gateway = gateway

    async def __call__(self, client: SocketModeClient, req: SocketModeRequest) -> None:
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))

        if req.type != "events_api":
            return
        event = (req.payload or {}).get("event", {})
        if event.get("type") != "link_shared":
            return

        await self.handle_link_shared(event)

    async def handle_link_shared(self, raw_event: dict) -> None:
        """Unfurl one ``link_shared`` event and post the result back to Slack."""
        try:
            event = ShareEvent.from_event(raw_event)
        except (KeyError, ValidationError) as e:
            logger.warning("Ignoring malformed link_shared event: %s", e)
            return

        try:
            unfurls = await self._service.handle_share_event(event)
            if not unfurls:
                logger.debug(
                    "Nothing to unfurl",
                    extra={"channel": event.channel, "message_ts": event.message_ts},
                )
                return
            await self._gateway.post_unfurls(event.channel, event.message_ts, unfurls)
        except SlackApiError as e:
            logger.error(
                "Slack API error while unfurling: %s",
                e.response.get("error", str(e)) if e.response else e,
                extra={"channel": event.channel, "message_ts": event.message_ts},
            )
        except (aiohttp.ClientError, TimeoutError, ValidationError) as e:
            # Transport failures and conversations.info replies that do not validate
            logger.error(
                "Could not unfurl event: %s",
                e,
                extra={"channel": event.channel, "message_ts": event.message_ts},
            )


def build_socket_client(
    settings: Settings,
    web_client: AsyncWebClient,
    listener: LinkSharedListener,
) -> SocketModeClient:
    """Create a Socket Mode client with the link_shared listener registered."""
    client = SocketModeClient(app_token=settings.slack_app_token, web_client=web_client)
    client.socket_mode_request_listeners.append(listener)
    return client
