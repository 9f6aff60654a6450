"""Pydantic data models for the Notion link unfurler."""

from src.models.document import NotionReference, PreviewCard, ReferenceKind
from src.models.errors import (
    ConfigurationError,
    FetchError,
    FormatError,
    TitleError,
    UnfurlError,
)
from src.models.notion import Block, BlockChildren, NotionDatabase, NotionPage, RichText
from src.models.slack import ConversationInfo, SharedLink, ShareEvent

__all__ = [
    "Block",
    "BlockChildren",
    "ConfigurationError",
    "ConversationInfo",
    "FetchError",
    "FormatError",
    "NotionDatabase",
    "NotionPage",
    "NotionReference",
    "PreviewCard",
    "ReferenceKind",
    "RichText",
    "ShareEvent",
    "SharedLink",
    "TitleError",
    "UnfurlError",
]
