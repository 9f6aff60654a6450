"""Document-related models: classified Notion references and preview cards."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ReferenceKind(str, Enum):
    """What a Notion URL points at."""

    PAGE = "page"
    DATABASE = "database"


class NotionReference(BaseModel):
    """A Notion page or database recognised in a shared URL.

    Derived purely from the URL, so the same URL always yields an equal
    reference.
    """

    model_config = {"frozen": True}

    kind: ReferenceKind
    id: str = Field(..., min_length=1, description="Notion page or database ID")
    url: str = Field(..., description="Cleaned URL used as the click-through link")


class PreviewCard(BaseModel):
    """Rich preview posted back to Slack in place of a bare link.

    Transient: built for one ``chat.unfurl`` call and not retained.
    """

    author_icon: str | None = None
    author_name: str | None = None
    title: str
    title_link: str
    text: str
    footer: str

    def to_attachment(self) -> dict[str, Any]:
        """Serialize as a Slack message attachment."""
        return self.model_dump(exclude_none=True)
