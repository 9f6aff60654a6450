"""Business logic services for the Notion link unfurler."""

from src.services.classifier import classify_url, unescape_url
from src.services.markdown import PageMarkdownExporter
from src.services.notion_client import NotionClient
from src.services.renderer import PreviewRenderer
from src.services.slack import LinkSharedListener, SlackGateway
from src.services.unfurl import ConversationDirectory, UnfurlService

__all__ = [
    "ConversationDirectory",
    "LinkSharedListener",
    "NotionClient",
    "PageMarkdownExporter",
    "PreviewRenderer",
    "SlackGateway",
    "UnfurlService",
    "classify_url",
    "unescape_url",
]
