"""Turn a link_shared event into Notion preview cards."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from src.config import Settings
from src.models.document import NotionReference, PreviewCard, ReferenceKind
from src.models.errors import UnfurlError
from src.models.slack import ConversationInfo, SharedLink, ShareEvent
from src.services.classifier import classify_url, unescape_url
from src.services.renderer import PreviewRenderer

logger = logging.getLogger(__name__)


@runtime_checkable
class ConversationDirectory(Protocol):
    """Looks up the conversation an event was posted in."""

    async def get_conversation(self, channel_id: str) -> ConversationInfo: ...


class UnfurlService:
    """Classify each shared Notion link and render the ones that match.

    One call handles one event; links are processed sequentially and a
    failing link never prevents the others from being unfurled.
    """

    def __init__(
        self,
        settings: Settings,
        conversations: ConversationDirectory,
        renderer: PreviewRenderer,
    ) -> None:
        self._settings = settings
        self._conversations = conversations
        self._renderer = renderer

    async def handle_share_event(self, event: ShareEvent) -> dict[str, PreviewCard]:
        """Build previews for the Notion links of one event.

        Args:
            event: The link_shared event.

        Returns:
            Cards keyed by the link URL exactly as Slack reported it. Empty when
            the conversation is shared with other workspaces.
        """
        conversation = await self._conversations.get_conversation(event.channel)
        if conversation.is_cross_workspace:
            logger.info(
                "Skipping unfurl in shared conversation",
                extra={"channel": event.channel, "message_ts": event.message_ts},
            )
            return {}

        unfurls: dict[str, PreviewCard] = {}
        for link in event.links:
            if link.domain != self._settings.notion_domain:
                continue
            card = await self._unfurl_link(link)
            if card is not None:
                unfurls[link.url] = card

        logger.info(
            "Handled link_shared event",
            extra={
                "channel": event.channel,
                "message_ts": event.message_ts,
                "num_links": len(event.links),
                "num_unfurls": len(unfurls),
            },
        )
        return unfurls

    async def _unfurl_link(self, link: SharedLink) -> PreviewCard | None:
        try:
            reference = classify_url(unescape_url(link.url), self._settings.notion_workspace)
            if reference is None:
                return None
            return await self._render(reference)
        except UnfurlError as e:
            logger.warning("Failed to unfurl %s: %s", link.url, e, extra={"url": link.url})
        except Exception:
            logger.exception("Unexpected error unfurling %s", link.url, extra={"url": link.url})
        return None

    async def _render(self, reference: NotionReference) -> PreviewCard:
        if reference.kind is ReferenceKind.DATABASE:
            return await self._renderer.render_database(reference.url, reference.id)
        return await self._renderer.render_page(reference.url, reference.id)
